"""
Rotation boundaries, date stamps and the rotation timer.
"""

from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Literal

from .diagnostics import get_logger

logger = get_logger("rotation")

RotationPeriod = Literal["daily", "weekly", "monthly", "yearly"]

_PERIOD_ALIASES = {
    "day": "daily",
    "daily": "daily",
    "week": "weekly",
    "weekly": "weekly",
    "month": "monthly",
    "monthly": "monthly",
    "year": "yearly",
    "yearly": "yearly",
}


def normalize_period(period: str) -> RotationPeriod:
    try:
        return _PERIOD_ALIASES[period]  # type: ignore[return-value]
    except KeyError:
        raise ValueError(f"Unknown rotation period (if UPPER-CASE then try lower-case): {period!r}") from None


def next_boundary(
    period: str,
    from_date: datetime | date | None = None,
    monday_first: bool = True,
) -> datetime:
    """Return local midnight at the start of the period following ``from_date``.

    - daily: the next calendar day
    - weekly: the next week start (Monday, or Sunday when ``monday_first`` is False)
    - monthly: day 1 of the next month
    - yearly: January 1 of the next year
    """
    period = normalize_period(period)
    if from_date is None:
        from_date = datetime.now()
    day = from_date.date() if isinstance(from_date, datetime) else from_date

    if period == "daily":
        result = day + timedelta(days=1)
    elif period == "weekly":
        index = day.weekday() if monday_first else (day.weekday() + 1) % 7
        result = day + timedelta(days=7 - index)
    elif period == "monthly":
        if day.month == 12:
            result = date(day.year + 1, 1, 1)
        else:
            result = date(day.year, day.month + 1, 1)
    else:
        result = date(day.year + 1, 1, 1)

    return datetime(result.year, result.month, result.day)


def seconds_until(boundary: datetime, now: datetime | None = None) -> float:
    now = now or datetime.now()
    return max((boundary - now).total_seconds(), 0.0)


# =============================================================================
# Stamps
# =============================================================================


def date_stamp(when: datetime | None = None) -> str:
    """Local date as ``YYYY-MM-DD``."""
    return (when or datetime.now()).strftime("%Y-%m-%d")


def time_stamp(when: datetime | None = None) -> str:
    """Local date and time as ``YYYY-MM-DDTHH:MM:SS``."""
    return (when or datetime.now()).strftime("%Y-%m-%dT%H:%M:%S")


def iso_timestamp(when: datetime | None = None) -> str:
    """UTC ISO 8601 with milliseconds and a ``Z`` suffix."""
    when = when or datetime.now(timezone.utc)
    return when.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# Timer
# =============================================================================


class RotationTimer:
    """One-shot timer re-armed after every rotation.

    Runs ``on_boundary`` at each period boundary. The underlying
    ``threading.Timer`` is a daemon thread so it never keeps the process
    alive on its own.
    """

    def __init__(
        self,
        period: str,
        on_boundary: Callable[[], None],
        *,
        monday_first: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.period = normalize_period(period)
        self.monday_first = monday_first
        self._on_boundary = on_boundary
        self._clock = clock
        self._timer: threading.Timer | None = None
        self._active = False
        self._lock = threading.Lock()

    @property
    def armed(self) -> bool:
        return self._active

    def next_fire(self) -> datetime:
        return next_boundary(self.period, self._clock(), self.monday_first)

    def start(self) -> None:
        with self._lock:
            if self._active:
                return
            self._active = True
            self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._active = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _arm(self) -> None:
        now = self._clock()
        delay = seconds_until(next_boundary(self.period, now, self.monday_first), now)
        timer = threading.Timer(delay, self._fire)
        timer.daemon = True
        self._timer = timer
        timer.start()
        logger.debug("rotation_armed", period=self.period, delay=delay)

    def _fire(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._timer = None
        try:
            self._on_boundary()
        except Exception:
            # Nobody to raise to on the timer thread.
            logger.exception("rotation_failed", period=self.period)
        finally:
            with self._lock:
                if self._active:
                    self._arm()
