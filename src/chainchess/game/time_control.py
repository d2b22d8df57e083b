"""Time controls and the rating/lobby category they belong to."""

from dataclasses import dataclass
from typing import Self

from chainchess.core.exceptions import InvalidTimeControlError
from chainchess.core.shared_types import Category

# A game is assumed to last about 40 moves: estimated duration = base + 40 * increment
ESTIMATED_MOVES = 40

# (upper bound on estimated duration in seconds, category). Anything above the last bound is classical.
CATEGORY_BOUNDS: list[tuple[float, Category]] = [
    (180, Category.BULLET),
    (480, Category.BLITZ),
    (1500, Category.RAPID),
]


@dataclass(frozen=True)
class TimeControl:
    base_seconds: float
    increment_seconds: float

    @classmethod
    def validated(cls, base_seconds: float, increment_seconds: float) -> Self:
        if increment_seconds < 0:
            raise InvalidTimeControlError(
                f"negative increment invalid: {increment_seconds}"
            )
        if base_seconds <= 0:
            raise InvalidTimeControlError(
                f"base time must be positive, got {base_seconds}"
            )
        return cls(base_seconds, increment_seconds)

    @property
    def estimated_duration(self) -> float:
        return self.base_seconds + ESTIMATED_MOVES * self.increment_seconds

    @property
    def category(self) -> Category:
        for upper_bound, category in CATEGORY_BOUNDS:
            if self.estimated_duration < upper_bound:
                return category
        return Category.CLASSICAL
