"""Domain dataclasses for the rotation calendar."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from .shift_types import ShiftLabel

CYCLE_WEEKS = 4


def as_day(value: date) -> date:
    """Calendar day of a date or datetime; datetimes keep their own wall-clock date."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class WeekPattern:
    """Labels for one week of the cycle: Monday-Friday and Saturday-Sunday."""

    weekday: ShiftLabel
    weekend: ShiftLabel

    def label(self, is_weekend: bool) -> ShiftLabel:
        return self.weekend if is_weekend else self.weekday


@dataclass(frozen=True)
class RotationPolicy:
    """One version of the rotation rule.

    ``anchor_monday`` is day zero of the week arithmetic and
    ``cycle_phase_offset`` says which cycle week that Monday falls in.
    ``weeks`` holds one :class:`WeekPattern` per cycle week index.
    """

    name: str
    effective_from: date
    anchor_monday: date
    cycle_phase_offset: int
    weeks: Tuple[WeekPattern, ...]

    def label_for(self, week_in_cycle: int, is_weekend: bool) -> ShiftLabel:
        return self.weeks[week_in_cycle].label(is_weekend)


@dataclass(frozen=True)
class OverrideEntry:
    date: date
    label: ShiftLabel
    note: Optional[str] = None


@dataclass(frozen=True)
class CalendarDay:
    date: date
    day: int
    is_current_month: bool
    is_today: bool
    shift: ShiftLabel

    @property
    def is_weekend(self) -> bool:
        return self.date.weekday() >= 5
