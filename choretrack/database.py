"""Database configuration and session management."""

import logging

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.orm import declarative_base, sessionmaker

from choretrack.config import get_settings

logger = logging.getLogger("choretrack.database")

settings = get_settings()

engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
    echo=settings.debug,
)


if engine.dialect.name == "sqlite":

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize database tables."""
    import choretrack.models  # noqa: F401  - registers tables on Base.metadata

    logger.info("Initializing database tables...")
    logger.info("Database URL: %s", settings.database_url)
    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Error initializing database")
        raise
    tables = inspect(engine).get_table_names()
    logger.info("Available tables after init: %s", tables)
