"""Rotation calculator: maps a calendar day to its shift label."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple, Union

from domain.models import CYCLE_WEEKS, RotationPolicy, as_day
from domain.policy_table import DEFAULT_SOURCE, OVERRIDE_SOURCE, PolicyTable
from domain.shift_types import ShiftLabel

DayLike = Union[date, datetime]

DEFAULT_LABEL = ShiftLabel.FREE
DAYS_PER_WEEK = 7


def day_number(day: DayLike) -> int:
    """Days since 0001-01-01 for the calendar day of *day*.

    Datetimes keep their own wall-clock date; no timezone conversion is done,
    so two values on the same calendar day always share a number.
    """

    return as_day(day).toordinal()


def weeks_since_anchor(anchor_monday: date, day: DayLike) -> int:
    # floor division: the Sunday before the anchor is week -1
    return (day_number(day) - day_number(anchor_monday)) // DAYS_PER_WEEK


def week_in_cycle(policy: RotationPolicy, day: DayLike) -> int:
    weeks = weeks_since_anchor(policy.anchor_monday, day)
    # % with a positive modulus is never negative in Python
    return (weeks + policy.cycle_phase_offset) % CYCLE_WEEKS


def is_weekend(day: DayLike) -> bool:
    return day.weekday() >= 5


@dataclass(frozen=True)
class Resolution:
    """A resolved label together with where it came from."""

    date: date
    label: ShiftLabel
    source: str
    week_in_cycle: Optional[int] = None


class RotationCalculator:
    """Pure lookup over a validated :class:`PolicyTable`.

    Safe to share between callers; nothing is mutated after construction.
    """

    OVERRIDE_SOURCE = OVERRIDE_SOURCE
    DEFAULT_SOURCE = DEFAULT_SOURCE

    def __init__(self, table: PolicyTable) -> None:
        self._table = table

    @property
    def table(self) -> PolicyTable:
        return self._table

    def resolve(self, day: DayLike) -> Resolution:
        day = date.fromordinal(day_number(day))
        override = self._table.override_for(day)
        if override is not None:
            return Resolution(day, override.label, self.OVERRIDE_SOURCE)
        policy = self._table.policy_for(day)
        if policy is None:
            return Resolution(day, DEFAULT_LABEL, self.DEFAULT_SOURCE)
        idx = week_in_cycle(policy, day)
        return Resolution(day, policy.label_for(idx, is_weekend(day)), policy.name, idx)

    def shift_for(self, day: DayLike) -> ShiftLabel:
        return self.resolve(day).label

    __call__ = shift_for

    def iter_range(self, start: DayLike, end: DayLike) -> Iterator[Tuple[date, ShiftLabel]]:
        """Yield ``(day, label)`` for every day in the inclusive range."""

        first = date.fromordinal(day_number(start))
        last = date.fromordinal(day_number(end))
        day = first
        while day <= last:
            yield day, self.shift_for(day)
            day += timedelta(days=1)
