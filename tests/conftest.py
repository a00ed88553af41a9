from __future__ import annotations

from datetime import date

import pytest

from config import CONFIG
from domain.models import OverrideEntry, RotationPolicy, WeekPattern
from domain.policy_table import PolicyTable, table_from_config
from domain.shift_types import ShiftLabel
from rules.rotor import RotationCalculator

STANDARD_WEEKS = (
    WeekPattern(ShiftLabel.PRIMARY_MORNING, ShiftLabel.FREE),
    WeekPattern(ShiftLabel.SECONDARY_MORNING, ShiftLabel.FREE),
    WeekPattern(ShiftLabel.FREE, ShiftLabel.FULL),
    WeekPattern(ShiftLabel.AFTERNOON, ShiftLabel.FREE),
)


def make_policy(name="old", effective_from=date(2025, 10, 13), anchor=date(2025, 10, 13), phase=0, weeks=STANDARD_WEEKS):
    return RotationPolicy(
        name=name,
        effective_from=effective_from,
        anchor_monday=anchor,
        cycle_phase_offset=phase,
        weeks=tuple(weeks),
    )


def make_calculator(*policies, overrides=()):
    return RotationCalculator(PolicyTable(policies or (make_policy(),), overrides))


@pytest.fixture()
def calculator() -> RotationCalculator:
    return RotationCalculator(table_from_config(CONFIG))


@pytest.fixture()
def override_full_on_free_saturday() -> RotationCalculator:
    return make_calculator(overrides=[OverrideEntry(date(2025, 10, 18), ShiftLabel.FULL)])
