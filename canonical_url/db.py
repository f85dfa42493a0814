"""Database engine and session helpers for the content store."""
from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    """Declarative base for content tables."""


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/canonical.db")


def _resolve_sqlite_url(database_url: str) -> str:
    """Return ``database_url`` with a relative SQLite path made absolute.

    The parent directory of the database file is created so a fresh checkout
    can start the app without any setup.
    """

    url = make_url(database_url)
    database_path = url.database
    if not database_path or database_path == ":memory:":
        return database_url

    if database_path.startswith("file:"):
        database_path = database_path.replace("file:", "", 1)

    resolved_path = Path(database_path)
    if not resolved_path.is_absolute():
        project_root = Path(__file__).resolve().parent.parent
        resolved_path = (project_root / resolved_path).resolve(strict=False)
    else:
        resolved_path = resolved_path.expanduser().resolve(strict=False)

    os.makedirs(resolved_path.parent, exist_ok=True)
    return url.set(database=resolved_path.as_posix()).render_as_string(hide_password=False)


connect_args: dict[str, Any] = {}
if make_url(DATABASE_URL).drivername.startswith("sqlite"):
    connect_args["check_same_thread"] = False
    DATABASE_URL = _resolve_sqlite_url(DATABASE_URL)

engine = create_engine(DATABASE_URL, connect_args=connect_args, future=True)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, class_=Session, future=True)


def init_db() -> None:
    """Create the content tables if they do not exist yet."""
    # Import models within the function to avoid circular imports.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a DB session."""
    with session_scope() as session:
        yield session
