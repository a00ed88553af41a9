from __future__ import annotations

import click
from flask import Flask, current_app, redirect, url_for

from adapters.config_loader import load_policy_table
from config import CONFIG
from domain.policy_table import ConfigurationError
from rules.rotor import RotationCalculator
from services import calendar_service
from services.app_context import EXTENSION_KEY, current_calculator, current_today


BLUEPRINTS = [
    ("blueprints.calendar.routes", "bp"),
]


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__)
    calendar_cfg = CONFIG.get("calendar", {})
    app.config.from_mapping(
        ROTATION_CONFIG=None,
        CALENDAR_LOCALE=calendar_cfg.get("locale", "es"),
        TIMEZONE=calendar_cfg.get("timezone", "Europe/Madrid"),
        FIRST_WEEKDAY=int(calendar_cfg.get("first_weekday", 0)),
        TODAY=None,
    )

    if test_config:
        app.config.update(test_config)

    # Invalid tables stop the app here, before any request is served.
    table = load_policy_table(app.config["ROTATION_CONFIG"])
    app.extensions[EXTENSION_KEY] = RotationCalculator(table)
    for policy in table:
        app.logger.info(
            "rotation policy %s: from %s, anchor %s, phase %d",
            policy.name,
            policy.effective_from.isoformat(),
            policy.anchor_monday.isoformat(),
            policy.cycle_phase_offset,
        )
    app.logger.info("rotation overrides: %d", len(table.overrides))

    for import_path, attr in BLUEPRINTS:
        module = __import__(import_path, fromlist=[attr])
        blueprint = getattr(module, attr)
        app.register_blueprint(blueprint)

    app.add_url_rule("/", endpoint="root", view_func=lambda: redirect(url_for("calendar.calendar_page")))

    @app.route("/healthz")
    def healthcheck() -> tuple[str, int]:
        return "OK", 200

    @app.cli.command("show-month")
    @click.option("--month", "month_str", default=None, help="Month as YYYY-MM (default: current month).")
    def show_month_command(month_str: str | None) -> None:
        """Print the shift grid for a month."""
        if month_str:
            try:
                year, month = calendar_service.parse_month(month_str)
            except ValueError as exc:
                raise click.BadParameter(str(exc), param_hint="--month") from exc
        else:
            today = current_today()
            year, month = today.year, today.month
        locale = current_app.config["CALENDAR_LOCALE"]
        first_weekday = current_app.config["FIRST_WEEKDAY"]
        cells = calendar_service.build_month_grid(
            year, month, current_calculator(), today=current_today(), first_weekday=first_weekday
        )
        click.echo(calendar_service.month_title(year, month, locale))
        click.echo(" ".join(f"{name:>9}" for name in calendar_service.weekday_headers(locale, first_weekday)))
        for week in calendar_service.weeks_of(cells):
            click.echo(" ".join(
                f"{cell.day:>2}{'*' if cell.is_today else ' '}{cell.shift.code:>6}" if cell.is_current_month
                else f"{'':>9}"
                for cell in week
            ))

    @app.cli.command("check-config")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def check_config_command(path: str) -> None:
        """Validate a rotation config file."""
        try:
            checked = load_policy_table(path)
        except ConfigurationError as exc:
            raise click.ClickException(f"Invalid rotation config: {exc}") from exc
        click.echo(f"OK: {len(checked)} policies, {len(checked.overrides)} overrides.")

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
