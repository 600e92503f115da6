"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from choretrack import __version__
from choretrack.config import get_settings
from choretrack.database import engine, init_db
from choretrack.models import Area, Completion, Task  # noqa: F401
from choretrack.routers import areas, dashboard, health, periods, tasks, time_control


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    init_db()
    yield
    # Shutdown
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("choretrack").setLevel(logging.INFO)
    settings = get_settings()

    app = FastAPI(
        title="ChoreTrack API",
        description="Planificador de tareas domésticas periódicas",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_exact_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_version_path = settings.api_version_path

    app.include_router(areas.router, prefix=f"{api_version_path}/areas", tags=["areas"])
    app.include_router(tasks.router, prefix=f"{api_version_path}/tasks", tags=["tasks"])
    app.include_router(dashboard.router, prefix=f"{api_version_path}/dashboard", tags=["dashboard"])
    app.include_router(periods.router, prefix=f"{api_version_path}/periods", tags=["periods"])
    app.include_router(time_control.router, prefix=f"{api_version_path}/time", tags=["time"])
    app.include_router(health.router, prefix=api_version_path, tags=["health"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from choretrack.logging_config import setup_logging

    settings = get_settings()
    setup_logging(debug=settings.debug)

    uvicorn.run(
        "choretrack.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        reload_excludes=["*.log", "*.db", "*.db-journal"] if settings.debug else None,
    )
