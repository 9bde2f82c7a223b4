"""
Database session management.

The costing service only reads from the back-office store, so sessions are
never committed here.
"""
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session

from src.core.config import get_settings

settings = get_settings()


def _connect_args(database_url: str) -> dict:
    # SQLite connections are shared with FastAPI's threadpool
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a read-only database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
