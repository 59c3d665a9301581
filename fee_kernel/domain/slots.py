"""
Scenario slots -- the closed set of parallel scenario positions.

A is the mandatory baseline; B and C are optional alternates. Slots
always iterate in declaration order (A, B, C).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fee_kernel.exceptions import SlotNotFoundError

MAX_SLOTS = 3


class Slot(str, Enum):
    """Scenario slot identifier."""

    A = "A"
    B = "B"
    C = "C"

    @property
    def default_label(self) -> str:
        return DEFAULT_SLOT_LABELS[self]

    @property
    def is_baseline(self) -> bool:
        return self is BASELINE_SLOT

    @classmethod
    def parse(cls, value: Any) -> "Slot":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise SlotNotFoundError(str(value)) from None


BASELINE_SLOT = Slot.A

DEFAULT_SLOT_LABELS: dict[Slot, str] = {
    Slot.A: "Base",
    Slot.B: "Alt 1",
    Slot.C: "Alt 2",
}
