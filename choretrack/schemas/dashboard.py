"""Pydantic schemas for the dashboard view."""

from datetime import datetime

from pydantic import BaseModel, Field

from choretrack.schemas.area import AreaSummary
from choretrack.schemas.period import PeriodResponse


class DashboardTask(BaseModel):
    """Task with its completion state in the current period."""

    id: int
    name: str
    description: str = ""
    is_completed: bool
    completed_at: datetime | None = None
    current_period: str
    next_due_date: datetime | None = None
    area: AreaSummary | None = None


class FrequencySummary(BaseModel):
    """Completion counters for one frequency."""

    total: int = 0
    completed: int = 0
    pending: int = 0


class DashboardResponse(BaseModel):
    """Everything the dashboard shows, keyed by lowercase frequency name."""

    generated_at: datetime
    periods: dict[str, PeriodResponse] = Field(default_factory=dict)
    tasks: dict[str, list[DashboardTask]] = Field(default_factory=dict)
    summary: dict[str, FrequencySummary] = Field(default_factory=dict)
