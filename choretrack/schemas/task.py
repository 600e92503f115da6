"""Pydantic schemas for tasks."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from choretrack.schemas.area import AreaSummary
from choretrack.utils.period_utils import Frequency, default_months, parse_months_array

MONTH_LIST_FREQUENCIES = frozenset({Frequency.QUARTERLY, Frequency.BIANNUAL, Frequency.ANNUAL})


def _normalize_months(value: Any) -> list[int] | None:
    """Accept a list or its JSON text; MonthsArrayParseError surfaces as a 422."""
    if value is None:
        return None
    return list(parse_months_array(value))


class TaskBase(BaseModel):
    """Fields shared by task creation and response."""

    name: str = Field(..., min_length=1, max_length=100, description="Task name")
    description: str | None = Field(None, description="Task description")
    frequency: Frequency = Field(..., description="How often the task recurs")
    area_id: int | None = Field(None, description="Area the task belongs to")
    start_date: datetime = Field(..., description="Date from which the task is eligible")
    week_of_month: int | None = Field(
        None,
        ge=1,
        le=4,
        description="Monday of the month the task is due (MONTHLY only)",
    )
    months_array: list[int] | None = Field(
        None,
        description="Months 1-12 in which the task is due (QUARTERLY/BIANNUAL/ANNUAL)",
    )


class TaskCreate(TaskBase):
    """Schema for creating a task."""

    active: bool = Field(True, description="Inactive tasks are hidden from the dashboard")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Task name cannot be empty")
        return value.strip()

    @field_validator("months_array", mode="before")
    @classmethod
    def validate_months(cls, value: Any) -> list[int] | None:
        return _normalize_months(value)

    @model_validator(mode="after")
    def apply_schedule_defaults(self) -> "TaskCreate":
        """Give month-list frequencies the first month of each period when none are listed."""
        if self.frequency in MONTH_LIST_FREQUENCIES and not self.months_array:
            self.months_array = list(default_months(self.frequency))
        return self


class TaskUpdate(BaseModel):
    """Schema for partially updating a task."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    frequency: Frequency | None = None
    area_id: int | None = None
    start_date: datetime | None = None
    week_of_month: int | None = Field(None, ge=1, le=4)
    months_array: list[int] | None = None
    active: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        """Do not allow an empty name."""
        if value is not None and not value.strip():
            raise ValueError("Task name cannot be empty")
        return value.strip() if value is not None else value

    @field_validator("months_array", mode="before")
    @classmethod
    def validate_months(cls, value: Any) -> list[int] | None:
        return _normalize_months(value)


class TaskResponse(TaskBase):
    """Task as returned by the API, with its state in the current period."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    months_array: list[int] = Field(default_factory=list)
    area: AreaSummary | None = None
    active: bool
    created_at: datetime
    updated_at: datetime
    frequency_label: str | None = Field(None, description="Localized frequency name")
    current_period: str | None = Field(None, description="Key of the current period")
    is_completed: bool = Field(False, description="Completed within the current period")
    completed_at: datetime | None = None
    next_due_date: datetime | None = None
