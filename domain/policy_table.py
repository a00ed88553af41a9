"""Versioned rotation policy table and its construction from configuration."""
from __future__ import annotations

import re
from bisect import bisect_right
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import CYCLE_WEEKS, OverrideEntry, RotationPolicy, WeekPattern, as_day
from .shift_types import ShiftLabel, parse_label

__all__ = [
    "ConfigurationError",
    "OVERRIDE_SOURCE",
    "DEFAULT_SOURCE",
    "PolicyTable",
    "policy_from_mapping",
    "override_from_mapping",
    "table_from_config",
]


class ConfigurationError(ValueError):
    """Raised when the rotation tables violate their invariants."""


# Resolution sources other than a policy name
OVERRIDE_SOURCE = "override"
DEFAULT_SOURCE = "default"
RESERVED_NAMES = frozenset({OVERRIDE_SOURCE, DEFAULT_SOURCE})


class PolicyTable:
    """Immutable, validated set of rotation policies plus date overrides.

    Policies are ordered by ``effective_from``; the policy applying to a day is
    the latest one that has already started. Overrides take precedence over
    every policy.
    """

    def __init__(
        self,
        policies: Iterable[RotationPolicy],
        overrides: Iterable[OverrideEntry] = (),
    ) -> None:
        self._policies: Tuple[RotationPolicy, ...] = tuple(policies)
        self._overrides: Dict[date, OverrideEntry] = {}
        self._validate_policies()
        for entry in overrides:
            if type(entry.date) is not date:
                raise ConfigurationError(f"Override {entry.date!r} must be a calendar date")
            if entry.date in self._overrides:
                raise ConfigurationError(f"Duplicate override for {entry.date.isoformat()}")
            if not isinstance(entry.label, ShiftLabel):
                raise ConfigurationError(f"Override {entry.date.isoformat()} has no valid label")
            self._overrides[entry.date] = entry
        self._starts: List[date] = [policy.effective_from for policy in self._policies]

    # ------------------------------------------------------------------
    def _validate_policies(self) -> None:
        if not self._policies:
            raise ConfigurationError("At least one rotation policy is required")
        previous: Optional[RotationPolicy] = None
        names = set()
        for policy in self._policies:
            _validate_policy(policy)
            if policy.name in names:
                raise ConfigurationError(f"Duplicate policy name {policy.name!r}")
            names.add(policy.name)
            if previous is not None:
                if policy.effective_from == previous.effective_from:
                    raise ConfigurationError(
                        f"Policies {previous.name!r} and {policy.name!r} share effective_from "
                        f"{policy.effective_from.isoformat()}"
                    )
                if policy.effective_from < previous.effective_from:
                    raise ConfigurationError(
                        f"Policy {policy.name!r} is out of order: {policy.effective_from.isoformat()} "
                        f"precedes {previous.effective_from.isoformat()}"
                    )
            previous = policy

    # ------------------------------------------------------------------
    @property
    def policies(self) -> Tuple[RotationPolicy, ...]:
        return self._policies

    @property
    def overrides(self) -> Tuple[OverrideEntry, ...]:
        return tuple(self._overrides[day] for day in sorted(self._overrides))

    @property
    def earliest(self) -> date:
        return self._starts[0]

    def override_for(self, day: date) -> Optional[OverrideEntry]:
        return self._overrides.get(as_day(day))

    def policy_for(self, day: date) -> Optional[RotationPolicy]:
        idx = bisect_right(self._starts, as_day(day))
        if idx == 0:
            return None
        return self._policies[idx - 1]

    def next_change_after(self, day: date) -> Optional[date]:
        idx = bisect_right(self._starts, as_day(day))
        if idx >= len(self._starts):
            return None
        return self._starts[idx]

    def __len__(self) -> int:
        return len(self._policies)

    def __iter__(self):
        return iter(self._policies)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "policies": [
                {
                    "name": policy.name,
                    "effective_from": policy.effective_from.isoformat(),
                    "anchor_monday": policy.anchor_monday.isoformat(),
                    "cycle_phase_offset": policy.cycle_phase_offset,
                    "weeks": [
                        {"weekday": week.weekday.name, "weekend": week.weekend.name}
                        for week in policy.weeks
                    ],
                }
                for policy in self._policies
            ],
            "overrides": [
                {"date": entry.date.isoformat(), "label": entry.label.name, "note": entry.note}
                for entry in self.overrides
            ],
        }


def _validate_policy(policy: RotationPolicy) -> None:
    if not policy.name or policy.name in RESERVED_NAMES:
        raise ConfigurationError(f"Policy name {policy.name!r} is empty or reserved")
    for field_name in ("effective_from", "anchor_monday"):
        if type(getattr(policy, field_name)) is not date:
            raise ConfigurationError(f"Policy {policy.name!r}: {field_name} must be a calendar date")
    if policy.anchor_monday.weekday() != 0:
        raise ConfigurationError(
            f"Policy {policy.name!r}: anchor {policy.anchor_monday.isoformat()} is not a Monday"
        )
    phase = policy.cycle_phase_offset
    if not isinstance(phase, int) or isinstance(phase, bool) or not 0 <= phase < CYCLE_WEEKS:
        raise ConfigurationError(
            f"Policy {policy.name!r}: cycle_phase_offset must be in [0, {CYCLE_WEEKS - 1}], "
            f"got {phase!r}"
        )
    if len(policy.weeks) != CYCLE_WEEKS:
        raise ConfigurationError(
            f"Policy {policy.name!r}: expected {CYCLE_WEEKS} cycle weeks, got {len(policy.weeks)}"
        )
    for idx, week in enumerate(policy.weeks):
        if not isinstance(week.weekday, ShiftLabel) or not isinstance(week.weekend, ShiftLabel):
            raise ConfigurationError(f"Policy {policy.name!r}: week {idx} is missing a label")


# -- Config mappings --------------------------------------------------------------
def _parse_date(value: Any, what: str) -> date:
    # YAML timestamps load as datetimes
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ConfigurationError(f"Invalid date for {what}: {value!r}") from None


def _parse_label(value: Any, what: str) -> ShiftLabel:
    try:
        return parse_label(value)
    except ValueError as exc:
        raise ConfigurationError(f"{what}: {exc}") from None


def _parse_weeks(raw: Any, name: str) -> Tuple[WeekPattern, ...]:
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        raise ConfigurationError(f"Policy {name!r}: 'weeks' must be a list")
    weeks: List[WeekPattern] = []
    for idx, spec in enumerate(raw):
        if not isinstance(spec, Mapping):
            raise ConfigurationError(f"Policy {name!r}: week {idx} must be a mapping")
        missing = [key for key in ("weekday", "weekend") if spec.get(key) is None]
        if missing:
            raise ConfigurationError(f"Policy {name!r}: week {idx} is missing {', '.join(missing)}")
        weeks.append(
            WeekPattern(
                weekday=_parse_label(spec["weekday"], f"Policy {name!r} week {idx}"),
                weekend=_parse_label(spec["weekend"], f"Policy {name!r} week {idx}"),
            )
        )
    return tuple(weeks)


def _parse_phase(value: Any, name: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and re.fullmatch(r"\s*[+-]?\d+\s*", value):
        return int(value)
    raise ConfigurationError(f"Policy {name!r}: invalid cycle_phase_offset {value!r}")


def policy_from_mapping(spec: Mapping[str, Any], default_weeks: Any = None) -> RotationPolicy:
    name = str(spec.get("name") or spec.get("effective_from") or "policy")
    for key in ("effective_from", "anchor_monday"):
        if key not in spec:
            raise ConfigurationError(f"Policy {name!r} is missing {key!r}")
    raw_weeks = spec.get("weeks", default_weeks)
    if raw_weeks is None:
        raise ConfigurationError(f"Policy {name!r} defines no weeks")
    phase = _parse_phase(spec.get("cycle_phase_offset", 0), name)
    return RotationPolicy(
        name=name,
        effective_from=_parse_date(spec["effective_from"], f"{name}.effective_from"),
        anchor_monday=_parse_date(spec["anchor_monday"], f"{name}.anchor_monday"),
        cycle_phase_offset=phase,
        weeks=_parse_weeks(raw_weeks, name),
    )


def override_from_mapping(spec: Mapping[str, Any]) -> OverrideEntry:
    if "date" not in spec or "label" not in spec:
        raise ConfigurationError(f"Override entries need 'date' and 'label': {dict(spec)!r}")
    day = _parse_date(spec["date"], "override")
    return OverrideEntry(
        date=day,
        label=_parse_label(spec["label"], f"Override {day.isoformat()}"),
        note=spec.get("note"),
    )


def table_from_config(config: Mapping[str, Any]) -> PolicyTable:
    """Build a :class:`PolicyTable` from a ``rotation`` config section.

    Accepts either the section itself or a full config holding a ``rotation`` key.
    """

    section = config.get("rotation", config) if isinstance(config, Mapping) else None
    if not isinstance(section, Mapping):
        raise ConfigurationError("Rotation config must be a mapping")
    default_weeks = section.get("weeks")
    policies = [policy_from_mapping(spec, default_weeks) for spec in section.get("policies") or []]
    overrides = [override_from_mapping(spec) for spec in section.get("overrides") or []]
    return PolicyTable(policies, overrides)
