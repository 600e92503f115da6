"""Logging configuration for the ChoreTrack server.

Console output plus two daily-rotating files under ``logs/``: everything at the
configured level, and errors only (kept longer, since they are what gets
looked at after the fact).
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

# Loggers used across the package; their level follows the debug flag
APP_LOGGERS = (
    "choretrack",
    "choretrack.areas",
    "choretrack.tasks",
    "choretrack.completions",
    "choretrack.periods",
    "choretrack.dashboard",
    "choretrack.database",
    "choretrack.system",
)


@dataclass(frozen=True, slots=True)
class LogFile:
    filename: str
    backup_days: int
    level: int | None = None  # None: follow the configured level


LOG_FILES = (
    LogFile("choretrack.log", backup_days=30),
    LogFile("choretrack_errors.log", backup_days=90, level=logging.ERROR),
)

_logging_configured = False


def _file_handler(log_dir: Path, spec: LogFile, default_level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_dir / spec.filename),
        when="midnight",
        interval=1,
        backupCount=spec.backup_days,
        encoding="utf-8",
    )
    handler.setLevel(spec.level if spec.level is not None else default_level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_dir: Path | None = None, debug: bool = False) -> None:
    """Install console and file handlers on the root logger.

    Only the first call has an effect.

    Args:
        log_dir: Directory for log files, created if missing. Defaults to ``logs/``
            in the project root.
        debug: DEBUG level (and SQL echo logging) instead of INFO.
    """
    global _logging_configured

    if _logging_configured:
        return

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(console)
    for spec in LOG_FILES:
        root.addHandler(_file_handler(log_dir, spec, level, formatter))

    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)

    # Third-party noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)

    _logging_configured = True

    logging.getLogger("choretrack.system").info(
        "Logging configured: level=%s, log_dir=%s", logging.getLevelName(level), log_dir
    )
