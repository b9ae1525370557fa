# jobmindr/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .config import settings
from .database import init_db
from .errors import register_error_handlers

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting %s (database: %s)", settings.app_name, settings.database_url)
    init_db()

    yield

    # Shutdown
    client = getattr(app.state, "api_client", None)
    if client is not None:
        await client.aclose()
        app.state.api_client = None
    logger.info("%s stopped", settings.app_name)


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_error_handlers(app)

from .routes import auth as auth_routes
from .routes import job_applications as job_applications_routes
from .routes import ui as ui_routes

app.include_router(job_applications_routes.router, prefix=settings.api_prefix)
app.include_router(auth_routes.router, prefix=settings.api_prefix)
app.include_router(ui_routes.router)

@app.get("/health")
def health():
    return {"ok": True, "app": settings.app_name}


if __name__ == "__main__":
    uvicorn.run(
        "jobmindr.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
