"""Service for marking tasks done within their current period."""

from collections.abc import Iterable
from datetime import datetime
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from choretrack.config import get_settings
from choretrack.models.completion import Completion
from choretrack.models.task import Task
from choretrack.services.task_service import TaskService
from choretrack.services.time_manager import get_current_time
from choretrack.utils.format_utils import format_frequency
from choretrack.utils.period_utils import InvalidConfigurationError, current_period_key

logger = logging.getLogger("choretrack.completions")


class TaskAlreadyCompletedError(Exception):
    """Raised when a task already has a completion for the current period."""

    def __init__(self, task: Task, period: str) -> None:
        super().__init__(f"Task {task.id} already completed in period {period}")
        self.task = task
        self.period = period


class CompletionService:
    """Completion records keyed by (task_id, period key)."""

    @staticmethod
    def period_key(task: Task, now: datetime | None = None) -> str:
        """Key of the period `task` is tracked against at `now`."""
        if now is None:
            now = get_current_time()
        return current_period_key(task.frequency, now, strict=get_settings().strict_frequency)

    @staticmethod
    def get_current_completion(db: Session, task: Task, now: datetime | None = None) -> Completion | None:
        """Completion of `task` in the current period, if any."""
        period = CompletionService.period_key(task, now)
        return (
            db.query(Completion)
            .filter(Completion.task_id == task.id, Completion.period == period)
            .first()
        )

    @staticmethod
    def complete_task(db: Session, task_id: int, now: datetime | None = None) -> Completion | None:
        """Record a completion for the current period.

        Returns None when the task does not exist. Raises TaskAlreadyCompletedError
        when the current period already has a completion, including the case where
        a concurrent request inserted it first.
        """
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            return None
        if now is None:
            now = get_current_time()

        period = CompletionService.period_key(task, now)
        existing = (
            db.query(Completion)
            .filter(Completion.task_id == task.id, Completion.period == period)
            .first()
        )
        if existing:
            raise TaskAlreadyCompletedError(task, period)

        completion = Completion(task_id=task.id, period=period, completed_at=now)
        db.add(completion)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise TaskAlreadyCompletedError(task, period) from exc
        db.refresh(completion)
        logger.info("Task completed: task_id=%s period=%s", task.id, period)
        return completion

    @staticmethod
    def uncomplete_task(db: Session, task_id: int, now: datetime | None = None) -> Task | None:
        """Remove the completion of the current period (no-op when there is none)."""
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            return None

        period = CompletionService.period_key(task, now)
        removed = (
            db.query(Completion)
            .filter(Completion.task_id == task.id, Completion.period == period)
            .delete(synchronize_session="fetch")
        )
        db.commit()
        db.refresh(task)
        logger.info("Task uncompleted: task_id=%s period=%s removed=%s", task.id, period, removed)
        return task

    @staticmethod
    def list_completions(db: Session, task_id: int) -> list[Completion]:
        """All completions of a task, newest first."""
        return (
            db.query(Completion)
            .filter(Completion.task_id == task_id)
            .order_by(Completion.completed_at.desc(), Completion.id.desc())
            .all()
        )

    @staticmethod
    def current_completions(
        db: Session,
        tasks: Iterable[Task],
        now: datetime | None = None,
    ) -> tuple[dict[int, str], dict[int, Completion]]:
        """Current period key per task and the matching completions, in one query."""
        if now is None:
            now = get_current_time()
        keys = {task.id: CompletionService.period_key(task, now) for task in tasks}
        if not keys:
            return keys, {}
        candidates = (
            db.query(Completion)
            .filter(
                Completion.task_id.in_(keys.keys()),
                Completion.period.in_(set(keys.values())),
            )
            .all()
        )
        matches = {c.task_id: c for c in candidates if keys.get(c.task_id) == c.period}
        return keys, matches

    @staticmethod
    def describe_status(
        task: Task,
        period: str,
        completion: Completion | None,
        now: datetime,
        locale: str | None = None,
    ) -> dict[str, Any]:
        """Fields describing `task` in the current period (merged into TaskResponse)."""
        try:
            due = TaskService.next_due_date(task, now)
        except InvalidConfigurationError as exc:
            logger.warning("No due date for task %s: %s", task.id, exc)
            due = None
        return {
            "frequency_label": format_frequency(task.frequency, locale or get_settings().locale),
            "current_period": period,
            "is_completed": completion is not None,
            "completed_at": completion.completed_at if completion else None,
            "next_due_date": due,
        }

    @staticmethod
    def get_status(db: Session, task: Task, now: datetime | None = None) -> dict[str, Any]:
        """Current-period status of a single task."""
        if now is None:
            now = get_current_time()
        period = CompletionService.period_key(task, now)
        completion = CompletionService.get_current_completion(db, task, now)
        return CompletionService.describe_status(task, period, completion, now)
