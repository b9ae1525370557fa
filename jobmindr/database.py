"""
Database wiring for the tracker: one engine for DATABASE_URL, a session
per request, and table creation at startup.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from .config import settings

# SQLite connections are handed between FastAPI's worker threads
_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=_connect_args, future=True)

# rows stay readable after commit; routes serialize them after the write
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)


class Base(DeclarativeBase):
    pass


def init_db(bind=None) -> None:
    """Create the job_applications and users tables if missing (default: the app engine)."""
    from . import models  # noqa: F401  registers the tables on Base.metadata

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Request-scoped Session; closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
