"""
clock.py - Day counter and calendar conversion

The settlement day is the only unit of time the engine knows: whole days
elapsed since 1970-01-01, obtained by integer division of wall-clock
seconds. There is no timezone and no leap-second handling.
"""

from __future__ import annotations
from typing import Protocol, runtime_checkable
import time

from .core import SECONDS_PER_DAY


def day_from_timestamp(seconds: int) -> int:
    """Convert seconds since the epoch to a day counter."""
    return int(seconds) // SECONDS_PER_DAY


def days_to_string(days: int) -> str:
    """
    Render a day counter as "DD-MM-YYYY" in the proleptic Gregorian calendar.

    Uses the civil-from-days algorithm (400-year eras shifted to start on
    March 1st), so it is exact for negative counters as well.

    Example:
        days_to_string(0)      # "01-01-1970"
        days_to_string(18628)  # "01-01-2021"
    """
    days += 719468
    era = days // 146097
    doe = days - era * 146097                                   # [0, 146096]
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365  # [0, 399]
    year = yoe + era * 400
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)             # [0, 365]
    mp = (5 * doy + 2) // 153                                   # [0, 11]
    day = doy - (153 * mp + 2) // 5 + 1                         # [1, 31]
    month = mp + 3 if mp < 10 else mp - 9                       # [1, 12]
    if month <= 2:
        year += 1
    return f"{day:02d}-{month:02d}-{year}"


@runtime_checkable
class Clock(Protocol):
    """Source of the current day counter."""

    def today(self) -> int:
        ...


class SystemClock:
    """Clock backed by the host's wall clock."""

    def today(self) -> int:
        return day_from_timestamp(int(time.time()))


class FixedClock:
    """
    Manually driven clock for simulations and tests.

    Time can only move forward, never backward.
    """

    def __init__(self, day: int = 0):
        if day < 0:
            raise ValueError(f"day must be non-negative, got {day}")
        self._day = day

    def today(self) -> int:
        return self._day

    def advance(self, days: int = 1) -> int:
        """Move the clock forward by `days` and return the new day."""
        if days < 0:
            raise ValueError(f"Cannot move time backwards: {days} days")
        self._day += days
        return self._day

    def set_day(self, day: int) -> None:
        if day < self._day:
            raise ValueError(f"Cannot move time backwards: {day} < {self._day}")
        self._day = day

    def __repr__(self) -> str:
        return f"FixedClock(day={self._day})"
