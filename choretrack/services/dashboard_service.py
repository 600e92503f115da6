"""Service assembling the dashboard: current periods and task status per frequency."""

from datetime import datetime
import logging

from sqlalchemy.orm import Session

from choretrack.config import get_settings
from choretrack.schemas.area import AreaSummary
from choretrack.schemas.dashboard import DashboardResponse, DashboardTask, FrequencySummary
from choretrack.schemas.period import PeriodResponse
from choretrack.services.completion_service import CompletionService
from choretrack.services.task_service import TaskService
from choretrack.services.time_manager import get_current_time
from choretrack.utils.period_utils import Frequency, get_current_period

logger = logging.getLogger("choretrack.dashboard")


class DashboardService:
    """Builds the dashboard view for the active tasks."""

    @staticmethod
    def build(db: Session, now: datetime | None = None, locale: str | None = None) -> DashboardResponse:
        """Group active tasks by frequency with their current-period status."""
        if now is None:
            now = get_current_time()
        if locale is None:
            locale = get_settings().locale

        periods: dict[str, PeriodResponse] = {}
        grouped: dict[str, list[DashboardTask]] = {}
        for frequency in Frequency:
            name = frequency.value.lower()
            period = get_current_period(frequency, now, locale)
            periods[name] = PeriodResponse.model_validate(period)
            grouped[name] = []

        tasks = TaskService.get_all_tasks(db, active_only=True)
        keys, completions = CompletionService.current_completions(db, tasks, now)

        for task in tasks:
            completion = completions.get(task.id)
            status = CompletionService.describe_status(task, keys[task.id], completion, now, locale)
            grouped[task.frequency.value.lower()].append(
                DashboardTask(
                    id=task.id,
                    name=task.name,
                    description=task.description or "",
                    is_completed=status["is_completed"],
                    completed_at=status["completed_at"],
                    current_period=status["current_period"],
                    next_due_date=status["next_due_date"],
                    area=AreaSummary.model_validate(task.area) if task.area else None,
                )
            )

        summary = {
            name: FrequencySummary(
                total=len(items),
                completed=sum(1 for item in items if item.is_completed),
                pending=sum(1 for item in items if not item.is_completed),
            )
            for name, items in grouped.items()
        }
        logger.debug("Dashboard built at %s for %s task(s)", now.isoformat(), len(tasks))
        return DashboardResponse(generated_at=now, periods=periods, tasks=grouped, summary=summary)
