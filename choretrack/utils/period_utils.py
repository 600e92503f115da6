"""Period engine: calendar periods, period keys and due dates for recurring chores.

Every function here is pure: the reference instant is always an argument
(``None`` means the wall clock, for convenience at call sites that do not care).
Dates are used in local civil time as given; no timezone conversion happens.

Period keys are persisted in ``completions.period`` and compared for equality,
so their format must not change:

    WEEKLY     2024-W03
    MONTHLY    2024-03
    QUARTERLY  2024-Q1
    BIANNUAL   2024-H2
    ANNUAL     2024
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from functools import partial
import json
import logging
from typing import Any, Protocol

from dateutil.relativedelta import relativedelta

from choretrack.utils.format_utils import DEFAULT_LOCALE, LocaleStrings, get_locale_strings

logger = logging.getLogger("choretrack.periods")

_WEEK = timedelta(days=7)


class Frequency(str, Enum):
    """How often a task recurs."""

    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    BIANNUAL = "BIANNUAL"
    ANNUAL = "ANNUAL"


class PeriodEngineError(Exception):
    """Base class for period engine failures."""


class InvalidFrequencyError(PeriodEngineError, ValueError):
    """Frequency is not one of the five known values."""

    def __init__(self, frequency: Any) -> None:
        self.frequency = frequency
        allowed = ", ".join(f.value for f in Frequency)
        super().__init__(f"Unknown frequency {frequency!r} (expected one of: {allowed})")


class MonthsArrayParseError(PeriodEngineError, ValueError):
    """Serialized months array is not a list of month numbers 1-12."""


class InvalidConfigurationError(PeriodEngineError, ValueError):
    """Task schedule cannot produce a due date (empty months, bad week of month)."""


@dataclass(frozen=True, slots=True)
class PeriodBounds:
    """Inclusive ``[start, end]`` interval of one period."""

    start: datetime
    end: datetime
    ordinal: int
    year: int

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True, slots=True)
class Period:
    """A period with its key and display label."""

    frequency: Frequency
    start: datetime
    end: datetime
    ordinal: int
    year: int
    key: str
    label: str


class ScheduleLike(Protocol):
    """Anything carrying the fields needed to compute a due date (ORM Task included)."""

    frequency: Any
    start_date: datetime
    week_of_month: int | None
    months_array: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class TaskSchedule:
    """Recurrence settings of a task, detached from persistence."""

    frequency: Frequency
    start_date: datetime
    week_of_month: int | None = None
    months_array: tuple[int, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "months_array", parse_months_array(self.months_array))


@dataclass(frozen=True, slots=True)
class FrequencyRules:
    """The four behaviours of one frequency, kept together so they change in lock-step."""

    bounds: Callable[[datetime], PeriodBounds]
    key: Callable[[PeriodBounds], str]
    label: Callable[[datetime, datetime, int, LocaleStrings], str]
    due_date: Callable[[ScheduleLike, datetime], datetime]


# --- months array -----------------------------------------------------------


def _coerce_month(item: Any) -> int:
    if isinstance(item, bool):
        raise MonthsArrayParseError(f"Month must be an integer, got {item!r}")
    if isinstance(item, int):
        month = item
    elif isinstance(item, str) and item.strip().isdecimal():
        month = int(item.strip())
    else:
        raise MonthsArrayParseError(f"Month must be an integer, got {item!r}")
    if not 1 <= month <= 12:
        raise MonthsArrayParseError(f"Month out of range 1-12: {month}")
    return month


def parse_months_array(raw: str | bytes | Iterable[Any] | None) -> tuple[int, ...]:
    """Parse a months array into a sorted tuple of unique month numbers.

    Accepts JSON text (``'[1, 4, 7, 10]'`` or ``'["1", "4"]'``), any iterable of
    ints or numeric strings, or ``None``. ``None`` and blank text give an empty
    tuple; anything else that is not a list of months 1-12 raises
    :class:`MonthsArrayParseError`.
    """
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes)):
        if isinstance(raw, bytes):
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise MonthsArrayParseError(f"Months array is not valid UTF-8: {raw!r}") from exc
        else:
            text = raw
        if not text.strip():
            return ()
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MonthsArrayParseError(f"Months array is not valid JSON: {text!r}") from exc
    else:
        data = raw
    if isinstance(data, (str, bytes, dict)) or not isinstance(data, Iterable):
        raise MonthsArrayParseError(f"Months array must be a list, got {type(data).__name__}")
    return tuple(sorted({_coerce_month(item) for item in data}))


def serialize_months(months: Iterable[Any] | str | None) -> str:
    """Serialize months to the JSON text stored in the database."""
    return json.dumps(list(parse_months_array(months)))


def default_months(frequency: Frequency) -> tuple[int, ...]:
    """First month of every period of `frequency` (empty for WEEKLY and MONTHLY)."""
    return {
        Frequency.QUARTERLY: (1, 4, 7, 10),
        Frequency.BIANNUAL: (1, 7),
        Frequency.ANNUAL: (1,),
    }.get(frequency, ())


# --- bounds -----------------------------------------------------------------


def _as_datetime(value: date | datetime | None) -> datetime:
    if value is None:
        return datetime.now()
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def _weekly_bounds(now: datetime) -> PeriodBounds:
    start = _start_of_day(now) - timedelta(days=now.weekday())
    end = _end_of_day(start + timedelta(days=6))
    # ISO week-year keeps the key identical for every day of a week spanning New Year
    iso_year, iso_week, _ = now.isocalendar()
    return PeriodBounds(start=start, end=end, ordinal=iso_week, year=iso_year)


def _month_block_bounds(now: datetime, months_per_period: int) -> PeriodBounds:
    index = (now.month - 1) // months_per_period
    start = _start_of_day(now).replace(month=index * months_per_period + 1, day=1)
    end = _end_of_day(start + relativedelta(months=months_per_period, days=-1))
    return PeriodBounds(start=start, end=end, ordinal=index + 1, year=now.year)


# --- keys -------------------------------------------------------------------


def _weekly_key(bounds: PeriodBounds) -> str:
    return f"{bounds.year}-W{bounds.ordinal:02d}"


def _monthly_key(bounds: PeriodBounds) -> str:
    return f"{bounds.year}-{bounds.ordinal:02d}"


def _quarterly_key(bounds: PeriodBounds) -> str:
    return f"{bounds.year}-Q{bounds.ordinal}"


def _biannual_key(bounds: PeriodBounds) -> str:
    return f"{bounds.year}-H{bounds.ordinal}"


def _annual_key(bounds: PeriodBounds) -> str:
    return f"{bounds.year}"


# --- labels -----------------------------------------------------------------


def _weekly_label(start: datetime, end: datetime, ordinal: int, strings: LocaleStrings) -> str:
    return (
        f"{start.day:02d} {strings.month_abbr[start.month]} - "
        f"{end.day:02d} {strings.month_abbr[end.month]} {end.year}"
    )


def _monthly_label(start: datetime, end: datetime, ordinal: int, strings: LocaleStrings) -> str:
    return f"{strings.month_names[start.month]} {start.year}"


def _quarterly_label(start: datetime, end: datetime, ordinal: int, strings: LocaleStrings) -> str:
    return strings.quarter_label.format(ordinal=ordinal, year=start.year)


def _biannual_label(start: datetime, end: datetime, ordinal: int, strings: LocaleStrings) -> str:
    return strings.half_label.format(ordinal=ordinal, year=start.year)


def _annual_label(start: datetime, end: datetime, ordinal: int, strings: LocaleStrings) -> str:
    return f"{start.year}"


# --- due dates --------------------------------------------------------------


def _weekly_due_date(task: ScheduleLike, reference: datetime) -> datetime:
    start = _as_datetime(task.start_date)
    weeks_since_start = (reference - start) // _WEEK
    return start + (weeks_since_start + 1) * _WEEK


def _monthly_due_date(task: ScheduleLike, reference: datetime) -> datetime:
    week_of_month = task.week_of_month or 1
    if not 1 <= week_of_month <= 4:
        raise InvalidConfigurationError(f"week_of_month must be between 1 and 4, got {week_of_month}")
    first_day = _start_of_day(reference).replace(day=1)
    first_monday = first_day + timedelta(days=(7 - first_day.weekday()) % 7)
    return first_monday + (week_of_month - 1) * _WEEK


def _listed_month_due_date(task: ScheduleLike, reference: datetime) -> datetime:
    months = task.months_array
    if not months:
        raise InvalidConfigurationError(
            f"{_frequency_name(task.frequency)} task needs at least one month to compute a due date"
        )
    first_of_month = _start_of_day(reference).replace(day=1)
    next_month = next((month for month in months if month > reference.month), None)
    if next_month is None:
        return first_of_month.replace(month=months[0]) + relativedelta(years=1)
    return first_of_month.replace(month=next_month)


def _frequency_name(frequency: Any) -> str:
    return str(getattr(frequency, "value", frequency))


PERIOD_RULES: dict[Frequency, FrequencyRules] = {
    Frequency.WEEKLY: FrequencyRules(
        bounds=_weekly_bounds,
        key=_weekly_key,
        label=_weekly_label,
        due_date=_weekly_due_date,
    ),
    Frequency.MONTHLY: FrequencyRules(
        bounds=partial(_month_block_bounds, months_per_period=1),
        key=_monthly_key,
        label=_monthly_label,
        due_date=_monthly_due_date,
    ),
    Frequency.QUARTERLY: FrequencyRules(
        bounds=partial(_month_block_bounds, months_per_period=3),
        key=_quarterly_key,
        label=_quarterly_label,
        due_date=_listed_month_due_date,
    ),
    Frequency.BIANNUAL: FrequencyRules(
        bounds=partial(_month_block_bounds, months_per_period=6),
        key=_biannual_key,
        label=_biannual_label,
        due_date=_listed_month_due_date,
    ),
    Frequency.ANNUAL: FrequencyRules(
        bounds=partial(_month_block_bounds, months_per_period=12),
        key=_annual_key,
        label=_annual_label,
        due_date=_listed_month_due_date,
    ),
}


# --- public API -------------------------------------------------------------


def resolve_frequency(value: Any, *, strict: bool = True) -> Frequency:
    """Convert `value` to a :class:`Frequency`.

    Unknown values raise :class:`InvalidFrequencyError` when `strict`, otherwise
    they are logged and treated as WEEKLY.
    """
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency(value)
    except ValueError as exc:
        if strict:
            raise InvalidFrequencyError(value) from exc
    logger.warning("Unknown frequency %r, falling back to %s", value, Frequency.WEEKLY.value)
    return Frequency.WEEKLY


def current_period_bounds(
    frequency: Frequency | str,
    now: date | datetime | None = None,
    *,
    strict: bool = True,
) -> PeriodBounds:
    """Bounds, ordinal and year of the period of `frequency` containing `now`."""
    rules = PERIOD_RULES[resolve_frequency(frequency, strict=strict)]
    return rules.bounds(_as_datetime(now))


def current_period_key(
    frequency: Frequency | str,
    now: date | datetime | None = None,
    *,
    strict: bool = True,
) -> str:
    """Key of the period of `frequency` containing `now` (e.g. ``"2024-W03"``)."""
    rules = PERIOD_RULES[resolve_frequency(frequency, strict=strict)]
    return rules.key(rules.bounds(_as_datetime(now)))


def format_period_label(
    frequency: Frequency | str,
    start: datetime,
    end: datetime,
    ordinal: int,
    locale: str = DEFAULT_LOCALE,
    *,
    strict: bool = True,
) -> str:
    """Human-readable label of a period, e.g. ``"15 ene - 21 ene 2024"``."""
    rules = PERIOD_RULES[resolve_frequency(frequency, strict=strict)]
    return rules.label(start, end, ordinal, get_locale_strings(locale))


def get_current_period(
    frequency: Frequency | str,
    now: date | datetime | None = None,
    locale: str = DEFAULT_LOCALE,
    *,
    strict: bool = True,
) -> Period:
    """Bounds, key and label of the current period in one value."""
    resolved = resolve_frequency(frequency, strict=strict)
    rules = PERIOD_RULES[resolved]
    bounds = rules.bounds(_as_datetime(now))
    return Period(
        frequency=resolved,
        start=bounds.start,
        end=bounds.end,
        ordinal=bounds.ordinal,
        year=bounds.year,
        key=rules.key(bounds),
        label=rules.label(bounds.start, bounds.end, bounds.ordinal, get_locale_strings(locale)),
    )


def is_in_current_period(
    frequency: Frequency | str,
    moment: date | datetime,
    now: date | datetime | None = None,
    *,
    strict: bool = True,
) -> bool:
    """Whether `moment` falls inside the period of `frequency` containing `now`."""
    return current_period_bounds(frequency, now, strict=strict).contains(_as_datetime(moment))


def next_due_date(
    task: ScheduleLike,
    reference: date | datetime | None = None,
    *,
    strict: bool = True,
) -> datetime:
    """Next date at which `task` is due, seen from `reference`.

    WEEKLY: next 7-day step from ``start_date`` strictly after `reference`.
    MONTHLY: the ``week_of_month``-th Monday of the reference month.
    QUARTERLY/BIANNUAL/ANNUAL: 1st of the next listed month, wrapping to the
    first listed month of next year.

    An unknown frequency raises :class:`InvalidFrequencyError` when `strict`,
    otherwise `reference` is returned.
    """
    reference = _as_datetime(reference)
    try:
        frequency = resolve_frequency(task.frequency)
    except InvalidFrequencyError:
        if strict:
            raise
        logger.warning("Unknown frequency %r, due date falls back to reference time", task.frequency)
        return reference
    return PERIOD_RULES[frequency].due_date(task, reference)
