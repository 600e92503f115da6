"""API router exposing the period engine."""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, status

from choretrack.config import get_settings
from choretrack.schemas.period import PeriodResponse
from choretrack.services.time_manager import get_current_time
from choretrack.utils.period_utils import Frequency, InvalidFrequencyError, get_current_period

router = APIRouter()


@router.get("/", response_model=list[PeriodResponse])
def get_current_periods(
    at: datetime | None = Query(None, description="Reference instant (defaults to now)"),
) -> list[PeriodResponse]:
    """Current period of every frequency."""
    now = at or get_current_time()
    locale = get_settings().locale
    return [
        PeriodResponse.model_validate(get_current_period(frequency, now, locale))
        for frequency in Frequency
    ]


@router.get("/{frequency}", response_model=PeriodResponse)
def get_period(
    frequency: str,
    at: datetime | None = Query(None, description="Reference instant (defaults to now)"),
) -> PeriodResponse:
    """Bounds, key and label of the period of `frequency` containing `at`."""
    settings = get_settings()
    try:
        period = get_current_period(
            frequency.upper(),
            at or get_current_time(),
            settings.locale,
            strict=settings.strict_frequency,
        )
    except InvalidFrequencyError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return PeriodResponse.model_validate(period)
