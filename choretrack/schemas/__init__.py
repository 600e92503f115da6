"""Pydantic schemas for API requests and responses."""

from choretrack.schemas.area import AreaCreate, AreaResponse, AreaSummary, AreaUpdate
from choretrack.schemas.completion import CompletionResponse
from choretrack.schemas.dashboard import DashboardResponse, DashboardTask, FrequencySummary
from choretrack.schemas.period import PeriodResponse
from choretrack.schemas.task import TaskCreate, TaskResponse, TaskUpdate

__all__ = [
    "AreaCreate",
    "AreaResponse",
    "AreaSummary",
    "AreaUpdate",
    "CompletionResponse",
    "DashboardResponse",
    "DashboardTask",
    "FrequencySummary",
    "PeriodResponse",
    "TaskCreate",
    "TaskResponse",
    "TaskUpdate",
]
