from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class RoundState(IntEnum):
    IDLE = 0
    AWAITING_DRAW = 1
    PARTIAL = 2
    COMPLETE = 3


@dataclass(frozen=True)
class RangeSpec:
    """Inclusive interval of eligible integers.

    ``max > min`` is enforced by validation rather than on construction so
    that a form can hold a half-edited range.
    """

    min: int
    max: int

    @property
    def size(self) -> int:
        return self.max - self.min + 1

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.min <= value <= self.max


@dataclass(frozen=True)
class DrawRequest:
    range: RangeSpec
    quantity: int
    all_at_once: bool = False

    @classmethod
    def of(
        cls,
        min_value: int,
        max_value: int,
        quantity: int,
        all_at_once: bool = False,
    ) -> "DrawRequest":
        return cls(RangeSpec(min_value, max_value), quantity, all_at_once)
