from __future__ import annotations

from dataclasses import dataclass

from .types import MAX_DISTANCE, MIN_DISTANCE


@dataclass
class DistanceTrack:
    value: int
    minimum: int = MIN_DISTANCE
    maximum: int = MAX_DISTANCE

    def __post_init__(self) -> None:
        if not self.minimum <= self.value <= self.maximum:
            raise ValueError(
                f"Distance {self.value} outside [{self.minimum}, {self.maximum}]."
            )

    def move(self, delta: int) -> int:
        """Shift the shared range, staying on the track. Returns the applied delta."""
        before = self.value
        self.value = max(self.minimum, min(self.maximum, self.value + delta))
        return self.value - before
