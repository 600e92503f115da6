"""Router for moving the virtual clock, so period rollover can be tried out.

Every response carries the period keys seen at the virtual time. Moving the
clock also reports which frequencies entered a new period, i.e. whose
completions no longer count as current.
"""

from datetime import datetime, timedelta
import logging

from fastapi import APIRouter
from pydantic import BaseModel, Field, field_serializer, model_validator

from choretrack.services.time_manager import (
    ClockState,
    get_time_state,
    reset_time_override,
    set_current_time,
    shift_time,
)
from choretrack.utils.period_utils import Frequency, current_period_key

router = APIRouter()
logger = logging.getLogger("choretrack.system")


class ClockResponse(BaseModel):
    """Virtual clock state and the periods it currently falls in."""

    real_now: datetime = Field(description="Actual system time")
    virtual_now: datetime = Field(description="Time used for period calculations")
    override_enabled: bool
    offset_seconds: float | None = Field(None, description="Virtual minus real time, in seconds")
    periods: dict[str, str] = Field(
        default_factory=dict, description="Current period key per frequency (lowercase)"
    )
    rolled_over: list[str] = Field(
        default_factory=list, description="Frequencies whose period changed with this request"
    )

    @field_serializer("real_now", "virtual_now")
    def _naive_iso(self, value: datetime) -> str:
        return value.replace(tzinfo=None).isoformat()


class ClockShift(BaseModel):
    """Relative move of the virtual clock; components may be negative."""

    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0

    @model_validator(mode="after")
    def _reject_zero_shift(self) -> "ClockShift":
        if not any((self.weeks, self.days, self.hours, self.minutes)):
            raise ValueError("At least one shift value must be non-zero")
        return self

    def as_timedelta(self) -> timedelta:
        return timedelta(weeks=self.weeks, days=self.days, hours=self.hours, minutes=self.minutes)


class ClockSet(BaseModel):
    """Absolute virtual time (local, truncated to the minute)."""

    target_datetime: datetime


def _period_keys(moment: datetime) -> dict[str, str]:
    return {frequency.value.lower(): current_period_key(frequency, moment) for frequency in Frequency}


def _clock_response(
    state: ClockState,
    virtual_now: datetime | None = None,
    before: dict[str, str] | None = None,
) -> ClockResponse:
    """Build the response; `before` holds the keys prior to moving the clock."""
    virtual_now = virtual_now or state.virtual_now
    periods = _period_keys(virtual_now)
    rolled_over = [name for name, key in periods.items() if before is not None and before[name] != key]
    if rolled_over:
        logger.info("Virtual clock entered new periods: %s", ", ".join(rolled_over))
    return ClockResponse(
        real_now=state.real_now,
        virtual_now=virtual_now,
        override_enabled=state.override_enabled,
        offset_seconds=state.offset_seconds,
        periods=periods,
        rolled_over=rolled_over,
    )


@router.get("/", response_model=ClockResponse)
def read_clock() -> ClockResponse:
    """Current clock state and period keys."""
    return _clock_response(get_time_state())


@router.post("/shift", response_model=ClockResponse)
def shift_clock(payload: ClockShift) -> ClockResponse:
    """Move the virtual clock by a relative amount."""
    before = _period_keys(get_time_state().virtual_now)
    shift_time(payload.as_timedelta())
    return _clock_response(get_time_state(), before=before)


@router.post("/set", response_model=ClockResponse)
def set_clock(payload: ClockSet) -> ClockResponse:
    """Jump the virtual clock to an absolute time."""
    before = _period_keys(get_time_state().virtual_now)
    target = set_current_time(payload.target_datetime)
    # Report the requested minute, not the microseconds elapsed since
    return _clock_response(get_time_state(), virtual_now=target, before=before)


@router.post("/reset", response_model=ClockResponse)
def reset_clock() -> ClockResponse:
    """Go back to real system time."""
    before = _period_keys(get_time_state().virtual_now)
    reset_time_override()
    return _clock_response(get_time_state(), before=before)
