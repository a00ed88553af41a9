"""Accessors for per-app rotation state."""
from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app

from rules.rotor import RotationCalculator

EXTENSION_KEY = "rotation"


def current_calculator() -> RotationCalculator:
    return current_app.extensions[EXTENSION_KEY]


def current_today() -> date:
    """Today in the configured timezone, or the fixed ``TODAY`` setting."""
    fixed = current_app.config.get("TODAY")
    if fixed:
        return fixed if isinstance(fixed, date) else date.fromisoformat(str(fixed))
    return datetime.now(ZoneInfo(current_app.config["TIMEZONE"])).date()
