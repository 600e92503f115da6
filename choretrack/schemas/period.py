"""Pydantic schemas exposing period engine results."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from choretrack.utils.period_utils import Frequency


class PeriodResponse(BaseModel):
    """Current period of a frequency."""

    model_config = ConfigDict(from_attributes=True)

    frequency: Frequency
    key: str = Field(..., description="Period key stored with completions")
    label: str = Field(..., description="Human-readable period label")
    start: datetime
    end: datetime
    ordinal: int = Field(..., description="Week, month, quarter or half number")
    year: int
