"""
Rotation policies for managed log files.

Design Pattern: Strategy Pattern. A LogDevice holds at most one policy and asks
it whether the live file is due and how to shift it aside.

- SizeRotation: numbered generations ``<path>.0`` .. ``<path>.(N-1)``
- CalendarRotation: dated copies ``<path>.YYYYMMDD``
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Union

from .exceptions import RotationConflict

DEFAULT_MAX_BYTES = 1048576
POSTFIX_FORMAT = "%Y%m%d"

_ONE_DAY = timedelta(days=1)
_END_OF_DAY = time(23, 59, 59)


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def end_of_day(day: date, tzinfo=None) -> datetime:
    return datetime.combine(day, _END_OF_DAY, tzinfo=tzinfo)


def period_boundary(period: Period, now: datetime) -> datetime:
    """Last instant a file may have been touched and still be due for rotation.

    daily:   end of yesterday
    weekly:  end of the day before the most recent Monday (today if Monday)
    monthly: end of the last day of the previous month
    """
    today = now.date()
    if period is Period.DAILY:
        day = today - _ONE_DAY
    elif period is Period.WEEKLY:
        day = today - timedelta(days=today.weekday()) - _ONE_DAY
    else:
        day = today.replace(day=1) - _ONE_DAY
    return end_of_day(day, now.tzinfo)


class RotationPolicy(ABC):
    """Abstract base class for rotation strategies."""

    @abstractmethod
    def is_due(self, stat: os.stat_result, now: datetime) -> bool:
        """Whether the live file described by ``stat`` must be shifted first."""
        ...

    @abstractmethod
    def shift(self, filename: str, now: datetime) -> str:
        """Move the live file aside and return the name it now has."""
        ...


class SizeRotation(RotationPolicy):
    """Shift once the live file grows past ``max_bytes``, keeping ``generations`` files."""

    def __init__(self, generations: int, max_bytes: int = DEFAULT_MAX_BYTES):
        self.generations = generations
        self.max_bytes = max_bytes

    def is_due(self, stat: os.stat_result, now: datetime) -> bool:
        # Never true for zero generations.
        return self.generations > 0 and stat.st_size > self.max_bytes

    def shift(self, filename: str, now: datetime) -> str:
        # Walk downwards so no generation is overwritten before it has moved.
        for i in range(self.generations - 3, -1, -1):
            aged = f"{filename}.{i}"
            if os.path.exists(aged):
                os.replace(aged, f"{filename}.{i + 1}")
        target = f"{filename}.0"
        os.replace(filename, target)
        return target

    def __repr__(self) -> str:
        return f"SizeRotation(generations={self.generations}, max_bytes={self.max_bytes})"


class CalendarRotation(RotationPolicy):
    """Shift once per day, week or month to a dated copy."""

    def __init__(self, period: Union[Period, str]):
        self.period = Period(period)

    def is_due(self, stat: os.stat_result, now: datetime) -> bool:
        mtime = datetime.fromtimestamp(stat.st_mtime, now.tzinfo)
        return mtime <= period_boundary(self.period, now)

    def shift(self, filename: str, now: datetime) -> str:
        postfix = period_boundary(self.period, now).strftime(POSTFIX_FORMAT)
        target = f"{filename}.{postfix}"
        if os.path.exists(target):
            raise RotationConflict(filename=filename, target=target)
        os.rename(filename, target)
        return target

    def __repr__(self) -> str:
        return f"CalendarRotation(period={self.period.value!r})"


RotationSpec = Union[None, int, str, RotationPolicy]


def parse_rotation(rotation: RotationSpec, max_bytes: int = DEFAULT_MAX_BYTES) -> Optional[RotationPolicy]:
    """Build a policy from the ``rotation`` construction option.

    ``None`` or ``0`` disables rotation, a positive integer keeps that many
    generations of at most ``max_bytes`` each, and ``"daily"``, ``"weekly"`` or
    ``"monthly"`` select calendar rotation.
    """
    if rotation is None or isinstance(rotation, RotationPolicy):
        return rotation
    if isinstance(rotation, str):
        text = rotation.strip().lower()
        if text.isdigit():
            return parse_rotation(int(text), max_bytes)
        try:
            return CalendarRotation(Period(text))
        except ValueError:
            raise ValueError(
                f"Unknown rotation {rotation!r}; expected a generation count or one of "
                + ", ".join(p.value for p in Period)
            ) from None
    if isinstance(rotation, bool) or not isinstance(rotation, int):
        raise ValueError(f"Unsupported rotation option: {rotation!r}")
    if rotation <= 0:
        return None
    return SizeRotation(rotation, max_bytes)
