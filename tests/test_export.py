import csv
import io
from datetime import date

from openpyxl import load_workbook

from adapters.report import csv_writer, xlsx_writer
from services import calendar_service


def _january(calculator):
    return calendar_service.build_month_grid(2026, 1, calculator, today=date(2026, 1, 15))


def test_csv_grid_lists_every_cell(calculator, tmp_path):
    cells = _january(calculator)
    path = csv_writer.write_grid(tmp_path / "grid.csv", cells)
    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == csv_writer.HEADER
    assert len(rows) == len(cells) + 1
    assert rows[1] == ["2025-12-29", "Mon", "0", "AFTERNOON", "AFTERNOON"]
    assert csv_writer.grid_to_text(cells) == path.read_bytes().decode("utf-8")


def test_xlsx_grid_layout(calculator, tmp_path):
    cells = _january(calculator)
    weekdays = calendar_service.weekday_headers()
    path = xlsx_writer.write_grid(tmp_path / "grid.xlsx", cells, weekdays, title="Enero 2026")
    ws = load_workbook(path).active
    assert ws.title == "Enero 2026"
    assert ws.cell(row=1, column=1).value == "Enero 2026"
    assert [ws.cell(row=2, column=col).value for col in range(1, 8)] == weekdays
    # Friday Jan 2 sits in the first row, fifth column
    assert ws.cell(row=3, column=5).value == "2\nFULL"
    assert ws.cell(row=7, column=7).value == "1\nFREE"


def test_xlsx_to_bytes_is_loadable(calculator):
    stream = xlsx_writer.grid_to_bytes(_january(calculator), calendar_service.weekday_headers())
    assert load_workbook(io.BytesIO(stream.getvalue())).active.title == "Calendar"
