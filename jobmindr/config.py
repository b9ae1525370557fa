# jobmindr/config.py
from __future__ import annotations
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent  # .../jobmindr

class Settings(BaseSettings):
    # App
    app_name: str = Field(default="JobMindr", alias="APP_NAME")
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # API
    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    application_number_attempts: int = Field(default=3, ge=1, alias="APPLICATION_NUMBER_ATTEMPTS")

    # UI (relative template dir is resolved from the package root)
    template_dir: str = Field(default="templates", alias="TEMPLATE_DIR")
    session_cookie: str = Field(default="jobmindr_user", alias="SESSION_COOKIE")
    client_cache_ttl: float = Field(default=30.0, ge=0, alias="CLIENT_CACHE_TTL")
    client_cache_size: int = Field(default=64, ge=1, alias="CLIENT_CACHE_SIZE")
    toast_dismiss_ms: int = Field(default=3000, ge=0, alias="TOAST_DISMISS_MS")

    # DB
    database_url: str = Field(default="sqlite:///./jobmindr.db", alias="DATABASE_URL")

    # .env loader
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @property
    def template_path(self) -> Path:
        p = Path(self.template_dir)
        return p if p.is_absolute() else (_PACKAGE_ROOT / p)

settings = Settings()
