"""Health check router."""

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from choretrack import __version__
from choretrack.config import get_settings
from choretrack.database import engine
from choretrack.services.time_manager import get_time_state

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Report service status, clock state and which settings are present."""
    settings = get_settings()
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError:
        database_ok = False
    state = get_time_state()
    return {
        "status": "ok" if database_ok else "degraded",
        "version": __version__,
        "timestamp": state.real_now.isoformat(),
        "virtual_time": state.virtual_now.isoformat() if state.override_enabled else None,
        "env": {
            "database": database_ok,
            "locale": settings.locale,
            "strict_frequency": settings.strict_frequency,
            "debug": settings.debug,
        },
    }
