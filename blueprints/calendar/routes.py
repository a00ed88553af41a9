from __future__ import annotations

from datetime import date, timedelta
from typing import Tuple

from flask import Blueprint, current_app, jsonify, render_template, request

from adapters.report import csv_writer, xlsx_writer
from services import calendar_service
from services.app_context import current_calculator, current_today

bp = Blueprint("calendar", __name__)

MAX_RANGE_DAYS = 366


class InvalidQuery(ValueError):
    """Invalid query input; rendered as a JSON 400."""


@bp.errorhandler(InvalidQuery)
def handle_bad_request(exc: InvalidQuery):
    return jsonify({"error": str(exc)}), 400


def _resolve_month() -> Tuple[int, int]:
    month = request.args.get("month")
    if not month:
        today = current_today()
        return today.year, today.month
    try:
        return calendar_service.parse_month(month)
    except ValueError as exc:
        raise InvalidQuery(str(exc)) from exc


def _parse_day(value: str | None, name: str) -> date:
    if not value:
        raise InvalidQuery(f"Missing '{name}'")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidQuery(f"'{name}' must be an ISO date (YYYY-MM-DD), got {value!r}") from None


def _month_view(year: int, month: int) -> dict:
    return calendar_service.month_view(
        year,
        month,
        current_calculator(),
        today=current_today(),
        locale=current_app.config["CALENDAR_LOCALE"],
        first_weekday=current_app.config["FIRST_WEEKDAY"],
    )


def _month_cells(year: int, month: int):
    return calendar_service.build_month_grid(
        year,
        month,
        current_calculator(),
        today=current_today(),
        first_weekday=current_app.config["FIRST_WEEKDAY"],
    )


@bp.route("/calendar")
def calendar_page():
    year, month = _resolve_month()
    view = _month_view(year, month)
    weeks = calendar_service.weeks_of(view["days"])
    return render_template("calendar/index.html", data=view, weeks=weeks)


@bp.route("/api/calendar")
def get_calendar():
    year, month = _resolve_month()
    return jsonify(_month_view(year, month))


@bp.route("/api/shifts/<date_str>")
def get_shift(date_str: str):
    day = _parse_day(date_str, "date")
    resolved = current_calculator().resolve(day)
    return jsonify({
        "date": resolved.date.isoformat(),
        "label": resolved.label.name,
        "code": resolved.label.code,
        "source": resolved.source,
        "week_in_cycle": resolved.week_in_cycle,
    })


@bp.route("/api/shifts")
def list_shifts():
    start = _parse_day(request.args.get("start"), "start")
    end = _parse_day(request.args.get("end"), "end")
    if end < start:
        raise InvalidQuery("'end' must not precede 'start'")
    if end - start >= timedelta(days=MAX_RANGE_DAYS):
        raise InvalidQuery(f"Range is limited to {MAX_RANGE_DAYS} days")
    return jsonify({
        "start": start.isoformat(),
        "end": end.isoformat(),
        "days": [
            {"date": day.isoformat(), "label": label.name, "code": label.code}
            for day, label in current_calculator().iter_range(start, end)
        ],
    })


@bp.route("/api/policies")
def list_policies():
    return jsonify(current_calculator().table.as_dict())


@bp.route("/api/export/xlsx")
def export_xlsx():
    year, month = _resolve_month()
    locale = current_app.config["CALENDAR_LOCALE"]
    stream = xlsx_writer.grid_to_bytes(
        _month_cells(year, month),
        calendar_service.weekday_headers(locale, current_app.config["FIRST_WEEKDAY"]),
        title=calendar_service.month_title(year, month, locale),
    )
    filename = f"shifts_{calendar_service.format_month(year, month)}.xlsx"
    return (stream.getvalue(), 200, {
        "Content-Type": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "Content-Disposition": f"attachment; filename={filename}",
    })


@bp.route("/api/export/csv")
def export_csv():
    year, month = _resolve_month()
    filename = f"shifts_{calendar_service.format_month(year, month)}.csv"
    return (csv_writer.grid_to_text(_month_cells(year, month)), 200, {
        "Content-Type": "text/csv; charset=utf-8",
        "Content-Disposition": f"attachment; filename={filename}",
    })
