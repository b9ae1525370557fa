# jobmindr/services/pages.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config import settings
from ..schemas import ApplicationStatus, EmploymentType


# --------------------------
# Templates
# --------------------------
def _resolve_templates_dir() -> Path:
    """
    Resolve the templates directory:
    - settings.template_path when absolute,
    - else relative to the package (jobmindr/templates).
    """
    base = settings.template_path
    if not base.is_dir():
        raise FileNotFoundError(f"Template directory not found: {base}")
    return base


@lru_cache(maxsize=1)
def _env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_resolve_templates_dir())),
        autoescape=select_autoescape(["html", "j2", "jinja"]),
        enable_async=False,
    )
    env.globals.update(
        app_name=settings.app_name,
        toast_dismiss_ms=settings.toast_dismiss_ms,
        statuses=[s.value for s in ApplicationStatus],
        employment_types=[e.value for e in EmploymentType],
    )
    return env


# --------------------------
# Public API
# --------------------------
def render_page(name: str, ctx: Dict[str, Any]) -> str:
    """Render templates/<name>.html.j2 with context."""
    return _env().get_template(f"{name}.html.j2").render(**ctx)
