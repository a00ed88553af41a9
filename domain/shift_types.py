"""Canonical shift labels for the rotation calendar."""
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Union

__all__ = [
    "ShiftLabel",
    "WORKING_LABELS",
    "DISPLAY_NAMES",
    "parse_label",
    "display_name",
    "is_working",
]


class ShiftLabel(str, Enum):
    PRIMARY_MORNING = "M1"
    SECONDARY_MORNING = "M2"
    FREE = "FREE"
    AFTERNOON = "AFTERNOON"
    FULL = "FULL"

    @property
    def code(self) -> str:
        return self.value


WORKING_LABELS = frozenset(
    {
        ShiftLabel.PRIMARY_MORNING,
        ShiftLabel.SECONDARY_MORNING,
        ShiftLabel.AFTERNOON,
        ShiftLabel.FULL,
    }
)

DISPLAY_NAMES: Dict[str, Dict[ShiftLabel, str]] = {
    "es": {
        ShiftLabel.PRIMARY_MORNING: "Mañana 1",
        ShiftLabel.SECONDARY_MORNING: "Mañana 2",
        ShiftLabel.FREE: "Libre",
        ShiftLabel.AFTERNOON: "Tarde",
        ShiftLabel.FULL: "Completo",
    },
    "en": {
        ShiftLabel.PRIMARY_MORNING: "Morning 1",
        ShiftLabel.SECONDARY_MORNING: "Morning 2",
        ShiftLabel.FREE: "Free",
        ShiftLabel.AFTERNOON: "Afternoon",
        ShiftLabel.FULL: "Full day",
    },
}


def parse_label(value: Union[str, ShiftLabel, None]) -> ShiftLabel:
    """Resolve a label from its enum name (``PRIMARY_MORNING``) or short code (``M1``).

    Matching is case-insensitive. Raises ``ValueError`` for unknown values.
    """

    if isinstance(value, ShiftLabel):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Unknown shift label: {value!r}")
    normalized = value.strip().upper()
    if normalized in ShiftLabel.__members__:
        return ShiftLabel[normalized]
    try:
        return ShiftLabel(normalized)
    except ValueError:
        raise ValueError(f"Unknown shift label: {value!r}") from None


def display_name(label: ShiftLabel, locale: Optional[str] = None) -> str:
    names = DISPLAY_NAMES.get((locale or "es").lower(), DISPLAY_NAMES["es"])
    return names[label]


def is_working(label: ShiftLabel) -> bool:
    return label in WORKING_LABELS
