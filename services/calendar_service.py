"""Month grid assembly on top of the rotation calculator."""
from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from domain.models import CalendarDay
from domain.shift_types import ShiftLabel, display_name

ShiftLookup = Callable[[date], ShiftLabel]
T = TypeVar("T")

MONTH_NAMES: Dict[str, Sequence[str]] = {
    "es": (
        "enero", "febrero", "marzo", "abril", "mayo", "junio",
        "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
    ),
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

# Monday first
WEEKDAY_NAMES: Dict[str, Sequence[str]] = {
    "es": ("Lun", "Mar", "Mié", "Jue", "Vie", "Sáb", "Dom"),
    "en": ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
}

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_month(value: str) -> Tuple[int, int]:
    """Parse ``YYYY-MM``. Raises ``ValueError`` on anything else."""

    match = _MONTH_RE.match((value or "").strip())
    if not match:
        raise ValueError(f"Month must look like YYYY-MM, got {value!r}")
    year, month = int(match.group(1)), int(match.group(2))
    # the grid spills into neighbouring months, so the last supported year is 9998
    if not 1 <= month <= 12 or not 1 <= year <= 9998:
        raise ValueError(f"Month out of range: {value!r}")
    return year, month


def format_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return shift_month(year, month, -1)


def next_month(year: int, month: int) -> Tuple[int, int]:
    return shift_month(year, month, 1)


def _names(table: Dict[str, Sequence[str]], locale: Optional[str]) -> Sequence[str]:
    return table.get((locale or "es").lower(), table["es"])


def month_title(year: int, month: int, locale: Optional[str] = None) -> str:
    """Localized ``"<Month> <year>"`` with the first letter capitalized."""

    name = _names(MONTH_NAMES, locale)[month - 1]
    title = f"{name} {year}"
    return title[:1].upper() + title[1:]


def weekday_headers(locale: Optional[str] = None, first_weekday: int = 0) -> List[str]:
    names = list(_names(WEEKDAY_NAMES, locale))
    return names[first_weekday:] + names[:first_weekday]


def build_month_grid(
    year: int,
    month: int,
    shift_for: ShiftLookup,
    *,
    today: Optional[date] = None,
    first_weekday: int = 0,
) -> List[CalendarDay]:
    """Cells for the month view of ``year``/``month``.

    Leading days of the previous month align the first row to
    ``first_weekday``; trailing days of the next month complete the last row,
    so the length is always a multiple of 7. ``shift_for`` is called once per
    cell.
    """

    first = date(year, month, 1)
    _, days_in_month = calendar.monthrange(year, month)
    leading = (first.weekday() - first_weekday) % 7
    total = -(-(leading + days_in_month) // 7) * 7
    start = first - timedelta(days=leading)

    cells: List[CalendarDay] = []
    for offset in range(total):
        day = start + timedelta(days=offset)
        cells.append(
            CalendarDay(
                date=day,
                day=day.day,
                is_current_month=(day.year, day.month) == (year, month),
                is_today=today is not None and day == today,
                shift=shift_for(day),
            )
        )
    return cells


def weeks_of(cells: Sequence[T]) -> List[List[T]]:
    return [list(cells[idx:idx + 7]) for idx in range(0, len(cells), 7)]


def cell_to_dict(cell: CalendarDay, locale: Optional[str] = None) -> Dict[str, object]:
    return {
        "date": cell.date.isoformat(),
        "day": cell.day,
        "is_current_month": cell.is_current_month,
        "is_today": cell.is_today,
        "is_weekend": cell.is_weekend,
        "shift": cell.shift.name,
        "code": cell.shift.code,
        "shift_name": display_name(cell.shift, locale),
    }


def month_view(
    year: int,
    month: int,
    shift_for: ShiftLookup,
    *,
    today: Optional[date] = None,
    locale: Optional[str] = None,
    first_weekday: int = 0,
) -> Dict[str, object]:
    """Everything the month page needs, as plain data."""

    cells = build_month_grid(year, month, shift_for, today=today, first_weekday=first_weekday)
    return {
        "month": format_month(year, month),
        "title": month_title(year, month, locale),
        "weekdays": weekday_headers(locale, first_weekday),
        "prev": format_month(*previous_month(year, month)),
        "next": format_month(*next_month(year, month)),
        "days": [cell_to_dict(cell, locale) for cell in cells],
    }
