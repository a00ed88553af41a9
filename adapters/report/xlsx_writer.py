"""Excel export of a month grid."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from domain.models import CalendarDay
from domain.shift_types import ShiftLabel

HEADER_FONT = Font(bold=True)
MUTED_FONT = Font(color="999999")
CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)

FILLS = {
    ShiftLabel.PRIMARY_MORNING: PatternFill("solid", fgColor="FFF2CC"),
    ShiftLabel.SECONDARY_MORNING: PatternFill("solid", fgColor="FCE4D6"),
    ShiftLabel.FREE: PatternFill("solid", fgColor="E2EFDA"),
    ShiftLabel.AFTERNOON: PatternFill("solid", fgColor="DDEBF7"),
    ShiftLabel.FULL: PatternFill("solid", fgColor="F8CBAD"),
}


def build_workbook(cells: Sequence[CalendarDay], weekdays: Sequence[str], *, title: str) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]

    ws.cell(row=1, column=1, value=title).font = HEADER_FONT
    for col, name in enumerate(weekdays, start=1):
        cell = ws.cell(row=2, column=col, value=name)
        cell.font = HEADER_FONT
        cell.alignment = CENTER
        ws.column_dimensions[cell.column_letter].width = 12

    for idx, day in enumerate(cells):
        row, col = 3 + idx // 7, 1 + idx % 7
        cell = ws.cell(row=row, column=col, value=f"{day.day}\n{day.shift.code}")
        cell.alignment = CENTER
        cell.fill = FILLS[day.shift]
        if not day.is_current_month:
            cell.font = MUTED_FONT
        elif day.is_today:
            cell.font = HEADER_FONT
        ws.row_dimensions[row].height = 32
    return wb


def write_grid(
    target: Union[str, Path, BinaryIO],
    cells: Sequence[CalendarDay],
    weekdays: Sequence[str],
    *,
    title: Optional[str] = None,
) -> Union[Path, BinaryIO]:
    wb = build_workbook(cells, weekdays, title=title or "Calendar")
    if isinstance(target, (str, Path)):
        path = Path(target)
        wb.save(path)
        return path
    wb.save(target)
    return target


def grid_to_bytes(cells: Sequence[CalendarDay], weekdays: Sequence[str], *, title: Optional[str] = None) -> BytesIO:
    stream = BytesIO()
    write_grid(stream, cells, weekdays, title=title)
    stream.seek(0)
    return stream
