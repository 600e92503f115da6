"""Pydantic schemas for Completion model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CompletionResponse(BaseModel):
    """A task completion within one period."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    period: str = Field(..., description="Period key, e.g. 2024-W03")
    completed_at: datetime
