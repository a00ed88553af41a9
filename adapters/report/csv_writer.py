"""CSV report helpers."""
from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from domain.models import CalendarDay


WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
HEADER = ["date", "weekday", "in_month", "code", "shift"]


def _write_rows(handle: TextIO, cells: Iterable[CalendarDay]) -> None:
    writer = csv.writer(handle)
    writer.writerow(HEADER)
    for cell in cells:
        writer.writerow([
            cell.date.isoformat(),
            WEEKDAYS[cell.date.weekday()],
            int(cell.is_current_month),
            cell.shift.code,
            cell.shift.name,
        ])


def write_grid(path: str | Path, cells: Sequence[CalendarDay]) -> Path:
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as handle:
        _write_rows(handle, cells)
    return path


def grid_to_text(cells: Sequence[CalendarDay]) -> str:
    buffer = io.StringIO()
    _write_rows(buffer, cells)
    return buffer.getvalue()
