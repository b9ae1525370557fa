# jobmindr/routes/ui.py
"""
Server-rendered dashboard and login screen.

Every read and write goes through JobTrackerClient against the JSON API,
so the pages see exactly what an external client would. The "session" is a
cookie holding {"email": ...}; nothing on the server checks it beyond
deciding which page to show.
"""
from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote, urlencode

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from ..client import ApiError, JobTrackerClient
from ..config import settings
from ..schemas import (
    ApplicationFilters,
    JobApplicationCreate,
    field_messages,
    format_errors,
    is_valid_email,
)
from ..services import table_state
from ..services.pages import render_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ui"], include_in_schema=False)

FORM_FIELDS = (
    "jobTitle", "companyName", "dateApplied", "applicationStatus",
    "employmentType", "contactEmail", "applicationClosingDate",
)
FILTER_FIELDS = ("companyName", "status", "dateApplied", "sortBy", "sortOrder")


# --- dependencies / helpers ---
def get_api_client(request: Request) -> JobTrackerClient:
    """One in-process API client per app, talking to the app over ASGI."""
    client = getattr(request.app.state, "api_client", None)
    if client is None:
        client = JobTrackerClient(
            base_url=f"http://jobmindr.internal{settings.api_prefix}",
            transport=httpx.ASGITransport(app=request.app),
            cache_ttl=settings.client_cache_ttl,
            cache_size=settings.client_cache_size,
        )
        request.app.state.api_client = client
    return client


def current_user(request: Request) -> Optional[Dict[str, Any]]:
    raw = request.cookies.get(settings.session_cookie)
    if not raw:
        return None
    try:
        user = json.loads(unquote(raw))
    except ValueError:
        return None
    if not isinstance(user, dict) or not user.get("email"):
        return None
    return user


def _dashboard_url(params: Dict[str, Any], **extra: Any) -> str:
    merged = {**params, **extra}
    query = [
        (k, item)
        for k, v in merged.items()
        for item in (v if isinstance(v, (list, tuple)) else [v])
        if item not in (None, "")
    ]
    return "/dashboard" + (f"?{urlencode(query)}" if query else "")


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _toast_redirect(params: Dict[str, Any], message: str, kind: str = "success") -> RedirectResponse:
    return _redirect(_dashboard_url(params, toast=message, toastType=kind))


def _filter_params(source) -> Dict[str, str]:
    """Pull the listing filter/sort values out of a query string."""
    return {k: source.get(k) or "" for k in FILTER_FIELDS}


def _parse_ids(values: List[str]) -> List[int]:
    selected: List[int] = []
    for v in values:
        try:
            selected = table_state.select_row(selected, int(v), True)
        except ValueError:
            continue  # a non-numeric checkbox value can only come from a hand-edited form
    return selected


def _find_row(rows: List[Dict[str, Any]], application_id: int) -> Optional[Dict[str, Any]]:
    return next((r for r in rows if r["id"] == application_id), None)


def _default_form() -> Dict[str, str]:
    return {
        "jobTitle": "",
        "companyName": "",
        "dateApplied": date.today().isoformat(),
        "applicationStatus": "Applied",
        "employmentType": "",
        "contactEmail": "",
        "applicationClosingDate": "",
    }


async def _render_dashboard(
    client: JobTrackerClient,
    user: Dict[str, Any],
    params: Dict[str, str],
    *,
    form: Optional[Dict[str, str]] = None,
    form_errors: Optional[Dict[str, str]] = None,
    selected: Optional[List[int]] = None,
    modal: Optional[Dict[str, Any]] = None,
    toast: Optional[Dict[str, str]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    sort_by, sort_order = table_state.current_sort(params.get("sortBy"), params.get("sortOrder"))
    params = {**params, "sortBy": sort_by, "sortOrder": sort_order}

    try:
        filters = ApplicationFilters.model_validate(params)
    except ValidationError:
        filters = ApplicationFilters(sort_by=sort_by, sort_order=sort_order)
        params = {**params, "dateApplied": ""}
        toast = toast or {"message": "Invalid filter value ignored.", "type": "error"}

    try:
        applications = await client.list_applications(filters)
        companies = await client.list_companies()
    except ApiError as e:
        logger.error("Dashboard load failed: %s", e)
        applications, companies = [], []
        toast = {"message": "Failed to load job applications.", "type": "error"}

    selected = selected or []
    row_ids = [a["id"] for a in applications]
    columns = []
    for key, label in table_state.COLUMN_LABELS.items():
        next_by, next_order = table_state.next_sort(sort_by, sort_order, key)
        columns.append({
            "key": key,
            "label": label,
            "href": _dashboard_url(params, sortBy=next_by, sortOrder=next_order),
            "indicator": table_state.sort_indicator(sort_by, sort_order, key),
        })

    html = render_page("dashboard", {
        "user": user,
        "params": params,
        "applications": applications,
        "companies": companies,
        "columns": columns,
        "selected": selected,
        "all_selected": table_state.all_selected(selected, row_ids),
        "form": form or _default_form(),
        "form_errors": form_errors or {},
        "modal": modal,
        "toast": toast,
        "export_url": f"{settings.api_prefix}/job-applications/export?" + urlencode(filters.query_params()),
        "cancel_url": _dashboard_url(params),
    })
    return HTMLResponse(html, status_code=status_code)


def _toast_from_query(request: Request) -> Optional[Dict[str, str]]:
    message = request.query_params.get("toast")
    if not message:
        return None
    kind = request.query_params.get("toastType")
    return {"message": message, "type": kind if kind in ("success", "error") else "success"}


# --- entry / login ---
@router.get("/")
def index(request: Request):
    return _redirect("/dashboard" if current_user(request) else "/login")


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    if current_user(request):
        return _redirect("/dashboard")
    return HTMLResponse(render_page("login", {"form": {"email": ""}, "errors": {}, "login_error": ""}))


@router.post("/login", response_class=HTMLResponse)
async def login_submit(request: Request, client: JobTrackerClient = Depends(get_api_client)):
    form = await request.form()
    email = (form.get("email") or "").strip()
    password = form.get("password") or ""

    errors: Dict[str, str] = {}
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"
    if not password:
        errors["password"] = "Password is required"
    if errors:
        html = render_page("login", {"form": {"email": email}, "errors": errors, "login_error": ""})
        return HTMLResponse(html, status_code=400)

    try:
        user = await client.login(email, password)
    except ApiError as e:
        logger.info("Login rejected for %s: %s", email, e.message)
        html = render_page(
            "login", {"form": {"email": email}, "errors": {}, "login_error": "Invalid email or password"}
        )
        return HTMLResponse(html, status_code=400)

    resp = _redirect("/dashboard")
    resp.set_cookie(settings.session_cookie, quote(json.dumps(user)), httponly=True, samesite="lax")
    return resp


@router.post("/logout")
def logout():
    resp = _redirect("/login")
    resp.delete_cookie(settings.session_cookie)
    return resp


# --- dashboard ---
@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, client: JobTrackerClient = Depends(get_api_client)):
    user = current_user(request)
    if not user:
        return _redirect("/login")
    return await _render_dashboard(
        client, user, _filter_params(request.query_params),
        selected=_parse_ids(request.query_params.getlist("selected")),
        toast=_toast_from_query(request),
    )


@router.post("/dashboard/applications", response_class=HTMLResponse)
async def create_from_form(request: Request, client: JobTrackerClient = Depends(get_api_client)):
    user = current_user(request)
    if not user:
        return _redirect("/login")
    form = await request.form()
    params = _filter_params(request.query_params)
    values = {k: (form.get(k) or "").strip() for k in FORM_FIELDS}

    # same rules the API applies, checked before the round trip
    try:
        data = JobApplicationCreate.model_validate(values)
    except ValidationError as e:
        return await _render_dashboard(
            client, user, params,
            form=values, form_errors=field_messages(format_errors(e.errors())),
            toast={"message": "Please fix the highlighted fields.", "type": "error"},
            status_code=400,
        )

    try:
        await client.create_application(data.model_dump(mode="json", by_alias=True, exclude_none=True))
    except ApiError as e:
        return await _render_dashboard(
            client, user, params,
            form=values, form_errors=e.field_errors(),
            toast={"message": "Failed to create job application. Please try again.", "type": "error"},
            status_code=400 if e.status_code == 400 else 500,
        )
    return _toast_redirect(params, "Job application added successfully!")


@router.get("/dashboard/applications/{application_id}/status", response_class=HTMLResponse)
async def status_modal(
    application_id: int, request: Request, client: JobTrackerClient = Depends(get_api_client)
):
    user = current_user(request)
    if not user:
        return _redirect("/login")
    params = _filter_params(request.query_params)
    # the page behind the modal was listed with these filters, so look there first
    sort_by, sort_order = table_state.current_sort(params.get("sortBy"), params.get("sortOrder"))
    try:
        page_filters = ApplicationFilters.model_validate({**params, "sortBy": sort_by, "sortOrder": sort_order})
    except ValidationError:
        page_filters = None
    try:
        application = _find_row(await client.list_applications(page_filters), application_id)
        if application is None and page_filters is not None:
            application = _find_row(await client.list_applications(), application_id)
    except ApiError:
        return _toast_redirect(params, "Failed to load job application.", "error")
    if application is None:
        return _toast_redirect(params, "Job application not found.", "error")
    return await _render_dashboard(
        client, user, params,
        modal={"application": application, "current": application["applicationStatus"]},
    )


@router.post("/dashboard/applications/{application_id}/status")
async def status_update(
    application_id: int, request: Request, client: JobTrackerClient = Depends(get_api_client)
):
    if not current_user(request):
        return _redirect("/login")
    form = await request.form()
    params = _filter_params(request.query_params)
    new_status = form.get("applicationStatus") or ""
    if not new_status:
        return _toast_redirect(params, "Pick a status first.", "error")
    try:
        await client.update_application(application_id, {"applicationStatus": new_status})
    except ApiError as e:
        logger.warning("Status update for %s failed: %s", application_id, e)
        return _toast_redirect(params, "Failed to update application status.", "error")
    return _toast_redirect(params, "Application status updated successfully!")


# --- bulk delete (two steps) ---
@router.post("/dashboard/delete/confirm", response_class=HTMLResponse)
async def delete_confirm(request: Request, client: JobTrackerClient = Depends(get_api_client)):
    user = current_user(request)
    if not user:
        return _redirect("/login")
    form = await request.form()
    params = _filter_params(request.query_params)

    if form.get("select_all"):
        try:
            rows = await client.list_applications(ApplicationFilters.model_validate(params))
        except (ApiError, ValidationError):
            return _toast_redirect(params, "Failed to load job applications.", "error")
        ids = table_state.select_all([r["id"] for r in rows], True)
    else:
        ids = _parse_ids(form.getlist("ids"))

    if not ids:
        return _toast_redirect(params, "Select at least one application to delete.", "error")

    html = render_page("confirm_delete", {
        "user": user,
        "ids": ids,
        "params": params,
        "cancel_url": _dashboard_url(params, selected=ids),
    })
    return HTMLResponse(html)


@router.post("/dashboard/delete")
async def delete_selected(request: Request, client: JobTrackerClient = Depends(get_api_client)):
    if not current_user(request):
        return _redirect("/login")
    form = await request.form()
    params = _filter_params(request.query_params)
    ids = _parse_ids(form.getlist("ids"))
    if not ids:
        return _toast_redirect(params, "Select at least one application to delete.", "error")
    try:
        await client.delete_applications(ids)
    except ApiError as e:
        logger.warning("Bulk delete of %s failed: %s", ids, e)
        return _toast_redirect(params, "Failed to delete job applications.", "error")
    return _toast_redirect(params, f"{len(ids)} job application(s) deleted successfully!")
