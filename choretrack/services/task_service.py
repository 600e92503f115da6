"""Service for task business logic."""

from datetime import datetime
import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session, selectinload

from choretrack.config import get_settings
from choretrack.models.area import Area
from choretrack.models.task import Task
from choretrack.schemas.task import MONTH_LIST_FREQUENCIES
from choretrack.services.time_manager import get_current_time
from choretrack.utils import period_utils
from choretrack.utils.period_utils import Frequency, default_months

if TYPE_CHECKING:
    from choretrack.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger("choretrack.tasks")


class TaskService:
    """Service for managing periodic tasks."""

    @staticmethod
    def _ensure_area_exists(db: Session, area_id: int | None) -> None:
        if area_id is None:
            return
        if db.query(Area.id).filter(Area.id == area_id).first() is None:
            raise ValueError(f"Area with id {area_id} not found")

    @staticmethod
    def create_task(db: Session, task_data: "TaskCreate") -> Task:
        """Create a new task."""
        TaskService._ensure_area_exists(db, task_data.area_id)

        task = Task(**task_data.model_dump())
        db.add(task)
        db.commit()
        db.refresh(task)
        logger.info("Task created: id=%s frequency=%s", task.id, task.frequency.value)
        return task

    @staticmethod
    def get_task(db: Session, task_id: int) -> Task | None:
        """Get a task by ID."""
        return (
            db.query(Task)
            .options(selectinload(Task.area))
            .filter(Task.id == task_id)
            .first()
        )

    @staticmethod
    def get_all_tasks(
        db: Session,
        active_only: bool = False,
        area_id: int | None = None,
        frequency: Frequency | None = None,
    ) -> list[Task]:
        """Get tasks, optionally filtered by active flag, area and frequency."""
        query = db.query(Task).options(selectinload(Task.area))
        if active_only:
            query = query.filter(Task.active.is_(True))
        if area_id is not None:
            query = query.filter(Task.area_id == area_id)
        if frequency is not None:
            query = query.filter(Task.frequency == frequency)
        return query.order_by(Task.name, Task.id).all()

    @staticmethod
    def update_task(db: Session, task_id: int, task_data: "TaskUpdate") -> Task | None:
        """Apply a partial update to a task."""
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            return None

        update_data = task_data.model_dump(exclude_unset=True)
        if update_data.get("area_id") is not None:
            TaskService._ensure_area_exists(db, update_data["area_id"])
        for field in ("name", "frequency", "start_date", "active"):
            if field in update_data and update_data[field] is None:
                raise ValueError(f"Field '{field}' cannot be null")

        previous_frequency = task.frequency
        for key, value in update_data.items():
            setattr(task, key, value)

        # A new frequency without new months starts from that frequency's defaults
        if task.frequency != previous_frequency and "months_array" not in update_data:
            task.months_array = default_months(task.frequency)
        elif task.frequency in MONTH_LIST_FREQUENCIES and not task.months_array:
            task.months_array = default_months(task.frequency)

        db.commit()
        db.refresh(task)
        logger.info("Task updated: id=%s fields=%s", task.id, sorted(update_data))
        return task

    @staticmethod
    def delete_task(db: Session, task_id: int) -> bool:
        """Delete a task together with its completions."""
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            return False

        db.delete(task)
        db.commit()
        logger.info("Task deleted: id=%s", task_id)
        return True

    @staticmethod
    def next_due_date(task: Task, now: datetime | None = None) -> datetime:
        """Next due date of `task` as seen from `now` (virtual clock by default)."""
        if now is None:
            now = get_current_time()
        return period_utils.next_due_date(task, now, strict=get_settings().strict_frequency)
