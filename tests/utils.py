"""Shared helpers for ChoreTrack tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager
from datetime import datetime

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from choretrack.config import get_settings

# Wednesday of ISO week 3, far from any period boundary
MID_WEEK = datetime(2024, 1, 17, 12, 0)


def api_path(path: str) -> str:
    """Build an absolute REST path with the configured API version."""

    if not path.startswith("/"):
        path = f"/{path}"
    return f"{get_settings().api_version_path}{path}"


def create_sqlite_engine() -> tuple[Engine, sessionmaker]:
    """Create an in-memory SQLite engine and session factory for tests.

    StaticPool reuses one connection so every session sees the same database.
    """

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return engine, session_factory


@contextmanager
def session_scope(base, engine: Engine, session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Create the schema, yield a session, then drop everything."""

    base.metadata.create_all(bind=engine)
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
        base.metadata.drop_all(bind=engine)


@contextmanager
def client_with_session(
    app,
    dependency: Callable[..., Generator[Session, None, None]],
    session: Session,
) -> Generator[TestClient, None, None]:
    """Provide a TestClient whose DB dependency yields `session`."""

    def override_dependency() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[dependency] = override_dependency
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
