"""Virtual clock supplying the reference instant to the API layer.

The period engine never reads the wall clock itself; services ask this module
for "now". An offset can be applied so period rollover (new week, new quarter)
can be exercised without waiting for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
from threading import Lock

logger = logging.getLogger("choretrack.system")


@dataclass(frozen=True, slots=True)
class ClockState:
    """Snapshot of the clock at one instant."""

    real_now: datetime
    virtual_now: datetime
    override_enabled: bool
    offset_seconds: float | None


class TimeManager:
    """Process-wide clock offset, guarded by a lock."""

    _offset: timedelta | None = None
    _lock = Lock()

    @classmethod
    def now(cls) -> datetime:
        """Effective current time (real time plus offset)."""
        real_now = datetime.now()
        with cls._lock:
            offset = cls._offset
        return real_now if offset is None else real_now + offset

    @classmethod
    def state(cls) -> ClockState:
        real_now = datetime.now()
        with cls._lock:
            offset = cls._offset
        return ClockState(
            real_now=real_now,
            virtual_now=real_now if offset is None else real_now + offset,
            override_enabled=offset is not None,
            offset_seconds=offset.total_seconds() if offset is not None else None,
        )

    @classmethod
    def set_to(cls, target_time: datetime) -> datetime:
        """Move the clock so that "now" is `target_time` (minute precision)."""
        target_time = target_time.replace(second=0, microsecond=0)
        with cls._lock:
            cls._offset = target_time - datetime.now()
        logger.info("Virtual time set to %s", target_time.isoformat())
        return target_time

    @classmethod
    def shift(cls, delta: timedelta) -> datetime:
        """Move the clock by `delta` relative to its current offset."""
        with cls._lock:
            cls._offset = (cls._offset or timedelta()) + delta
        logger.info("Virtual time shifted by %s", delta)
        return cls.now()

    @classmethod
    def reset(cls) -> None:
        """Return to real system time."""
        with cls._lock:
            cls._offset = None
        logger.info("Virtual time override cleared")


def get_current_time() -> datetime:
    """Reference instant for period calculations and timestamps."""
    return TimeManager.now()


def set_current_time(target_time: datetime) -> datetime:
    return TimeManager.set_to(target_time)


def shift_time(delta: timedelta) -> datetime:
    return TimeManager.shift(delta)


def reset_time_override() -> None:
    TimeManager.reset()


def get_time_state() -> ClockState:
    return TimeManager.state()
