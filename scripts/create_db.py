"""Create the database tables and optionally seed demo areas and tasks."""

from __future__ import annotations

import argparse
from datetime import datetime
import logging
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from choretrack.database import SessionLocal, init_db  # noqa: E402  - import after sys.path adjustment
from choretrack.schemas.area import AreaCreate  # noqa: E402
from choretrack.schemas.task import TaskCreate  # noqa: E402
from choretrack.services.area_service import AreaService  # noqa: E402
from choretrack.services.task_service import TaskService  # noqa: E402
from choretrack.utils.period_utils import Frequency  # noqa: E402

logger = logging.getLogger("choretrack.system")

DEMO_AREAS = {
    "Cocina": "#EF4444",
    "Baño": "#3B82F6",
    "Dormitorio": "#8B5CF6",
    "Exterior": "#10B981",
}

DEMO_TASKS = [
    ("Fregar el suelo", "Cocina", Frequency.WEEKLY, {}),
    ("Limpiar el baño", "Baño", Frequency.WEEKLY, {}),
    ("Cambiar sábanas", "Dormitorio", Frequency.WEEKLY, {}),
    ("Limpiar nevera", "Cocina", Frequency.MONTHLY, {"week_of_month": 1}),
    ("Descalcificar grifos", "Baño", Frequency.MONTHLY, {"week_of_month": 3}),
    ("Limpiar horno", "Cocina", Frequency.QUARTERLY, {}),
    ("Lavar cortinas", "Dormitorio", Frequency.BIANNUAL, {"months_array": [4, 10]}),
    ("Revisar canalones", "Exterior", Frequency.ANNUAL, {"months_array": [11]}),
]


def seed(start_date: datetime) -> None:
    """Insert demo areas and tasks into an empty database."""
    db = SessionLocal()
    try:
        if AreaService.get_all_areas(db):
            logger.info("Database already has areas, skipping seed")
            return
        areas = {
            name: AreaService.create_area(db, AreaCreate(name=name, color=color))
            for name, color in DEMO_AREAS.items()
        }
        for name, area_name, frequency, extra in DEMO_TASKS:
            TaskService.create_task(
                db,
                TaskCreate(
                    name=name,
                    frequency=frequency,
                    area_id=areas[area_name].id,
                    start_date=start_date,
                    **extra,
                ),
            )
        logger.info("Seeded %s areas and %s tasks", len(DEMO_AREAS), len(DEMO_TASKS))
    finally:
        db.close()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", action="store_true", help="Insert demo areas and tasks")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    init_db()
    if args.seed:
        today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
        seed(today)
    logger.info("Database initialized")
    return 0


if __name__ == "__main__":
    sys.exit(main())
