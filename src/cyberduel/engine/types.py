from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

StatusFlag = Literal["stunned", "exposed"]
OverrideTag = Literal["zero_day", "flood", "air_gap", "honeypot"]
Side = Literal["a", "b"]

Phase = Literal[
    "awaiting_choices",
    "revealing",
    "resolving",
    "round_complete",
    "match_over",
    "aborted",
]

STATUS_FLAGS: tuple[StatusFlag, ...] = ("stunned", "exposed")
OVERRIDE_TAGS: tuple[OverrideTag, ...] = ("zero_day", "flood", "air_gap", "honeypot")

MIN_DISTANCE = 1
MAX_DISTANCE = 5

IDLE_TAG = "idle"


@dataclass(frozen=True)
class MoveEffect:
    """What a card does when revealed.

    distance_delta < 0 closes range (advance), > 0 opens it (retreat).
    """

    distance_delta: int = 0
    damage: int = 0
    block: int = 0
    inflicts: StatusFlag | None = None
    cleanse: bool = False
    override: OverrideTag | None = None


@dataclass(frozen=True)
class MoveCard:
    tag: str
    name: str
    min_distance: int
    max_distance: int
    priority: int
    effect: MoveEffect
    copies: int = 0
    rules_text: str = ""

    def legal_at(self, distance: int) -> bool:
        return self.min_distance <= distance <= self.max_distance

    def has_override(self, tag: OverrideTag) -> bool:
        return self.effect.override == tag
