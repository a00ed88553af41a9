from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import make_calculator, make_policy
from domain.models import OverrideEntry
from domain.shift_types import ShiftLabel
from rules.rotor import day_number, is_weekend, week_in_cycle, weeks_since_anchor

M1 = ShiftLabel.PRIMARY_MORNING
M2 = ShiftLabel.SECONDARY_MORNING
FREE = ShiftLabel.FREE
AFTERNOON = ShiftLabel.AFTERNOON
FULL = ShiftLabel.FULL


def test_first_weeks_of_old_policy():
    calc = make_calculator()
    anchor = date(2025, 10, 13)
    assert [calc.shift_for(anchor + timedelta(days=i)) for i in range(5)] == [M1] * 5
    assert calc.shift_for(date(2025, 10, 18)) is FREE
    assert calc.shift_for(date(2025, 10, 19)) is FREE
    assert calc.shift_for(date(2025, 10, 20)) is M2
    assert calc.shift_for(date(2025, 10, 27)) is FREE
    assert calc.shift_for(date(2025, 11, 1)) is FULL
    assert calc.shift_for(date(2025, 11, 2)) is FULL
    assert calc.shift_for(date(2025, 11, 3)) is AFTERNOON
    assert calc.shift_for(date(2025, 11, 10)) is M1


def test_days_before_first_policy_are_free():
    calc = make_calculator()
    day = date(2025, 10, 12)
    for _ in range(400):
        assert calc.shift_for(day) is FREE
        assert calc.resolve(day).source == "default"
        day -= timedelta(days=1)


def test_override_beats_policy(override_full_on_free_saturday):
    calc = override_full_on_free_saturday
    assert calc.shift_for(date(2025, 10, 18)) is FULL
    assert calc.resolve(date(2025, 10, 18)).source == "override"
    # the Sunday after is untouched
    assert calc.shift_for(date(2025, 10, 19)) is FREE


def test_override_before_first_policy():
    calc = make_calculator(overrides=[OverrideEntry(date(2025, 1, 6), ShiftLabel.AFTERNOON)])
    assert calc.shift_for(date(2025, 1, 6)) is AFTERNOON
    assert calc.shift_for(date(2025, 1, 7)) is FREE


def test_bundled_overrides(calculator):
    assert calculator.shift_for(date(2025, 12, 28)) is FULL
    assert calculator.shift_for(date(2026, 1, 2)) is FULL
    # without the override, Jan 2 would be an afternoon under the old policy
    assert calculator.shift_for(date(2026, 1, 1)) is AFTERNOON


def test_policy_switch_boundary(calculator):
    assert calculator.resolve(date(2026, 1, 9)).source == "old"
    assert calculator.shift_for(date(2026, 1, 9)) is M1
    assert calculator.resolve(date(2026, 1, 10)).source == "new"
    assert calculator.shift_for(date(2026, 1, 10)) is FULL
    assert calculator.shift_for(date(2026, 1, 11)) is FULL


def test_new_policy_restarts_on_third_week(calculator):
    assert calculator.resolve(date(2026, 1, 10)).week_in_cycle == 2
    assert calculator.shift_for(date(2026, 1, 12)) is AFTERNOON
    assert calculator.shift_for(date(2026, 1, 19)) is M1
    assert calculator.shift_for(date(2026, 1, 26)) is M2
    assert calculator.shift_for(date(2026, 2, 2)) is FREE
    assert calculator.shift_for(date(2026, 2, 7)) is FULL


def test_sunday_before_anchor_is_week_minus_one():
    anchor = date(2025, 10, 13)
    assert weeks_since_anchor(anchor, date(2025, 10, 12)) == -1
    assert weeks_since_anchor(anchor, date(2025, 10, 6)) == -1
    assert weeks_since_anchor(anchor, date(2025, 10, 5)) == -2
    assert weeks_since_anchor(anchor, anchor) == 0


def test_policy_effective_before_its_anchor():
    policy = make_policy(effective_from=date(2025, 10, 1))
    calc = make_calculator(policy)
    assert week_in_cycle(policy, date(2025, 10, 12)) == 3
    assert calc.shift_for(date(2025, 10, 10)) is AFTERNOON
    assert calc.shift_for(date(2025, 10, 6)) is AFTERNOON
    assert calc.shift_for(date(2025, 10, 3)) is FREE
    assert calc.shift_for(date(2025, 10, 4)) is FULL


@pytest.mark.parametrize("phase", [0, 1, 2, 3])
def test_week_in_cycle_is_never_negative(phase):
    policy = make_policy(effective_from=date(2000, 1, 3), phase=phase)
    day = date(2025, 10, 13) - timedelta(days=500)
    for _ in range(1000):
        assert 0 <= week_in_cycle(policy, day) <= 3
        day += timedelta(days=1)


def test_twenty_eight_day_period(calculator):
    start = date(2026, 1, 10)
    for offset in range(365):
        day = start + timedelta(days=offset)
        assert calculator.shift_for(day) is calculator.shift_for(day + timedelta(days=28))


def test_weekend_label_depends_only_on_cycle_week(calculator):
    day = date(2025, 10, 13)
    overrides = {entry.date for entry in calculator.table.overrides}
    while day < date(2027, 1, 1):
        if is_weekend(day) and day not in overrides:
            resolved = calculator.resolve(day)
            expected = FULL if resolved.week_in_cycle == 2 else FREE
            assert resolved.label is expected, day
        day += timedelta(days=1)


def test_repeated_calls_agree(calculator):
    day = date(2026, 3, 17)
    assert {calculator.shift_for(day) for _ in range(10)} == {calculator.shift_for(day)}


def test_datetimes_use_their_calendar_day(calculator):
    late = datetime(2026, 1, 12, 23, 59, tzinfo=timezone(timedelta(hours=-10)))
    early = datetime(2026, 1, 12, 0, 1)
    assert day_number(late) == day_number(date(2026, 1, 12))
    assert calculator.shift_for(late) is calculator.shift_for(early) is AFTERNOON


def test_calculator_is_callable(calculator):
    assert calculator(date(2026, 1, 19)) is M1


def test_iter_range_is_inclusive(calculator):
    days = list(calculator.iter_range(date(2026, 1, 9), date(2026, 1, 12)))
    assert [day for day, _ in days] == [date(2026, 1, 9) + timedelta(days=i) for i in range(4)]
    assert [label for _, label in days] == [M1, FULL, FULL, AFTERNOON]
