"""
Per-player chess clocks.

There is no background timer. A clock only stores the time left as of its last update; the remaining time is recomputed
whenever a move or a timeout claim comes in.
"""

from dataclasses import dataclass, replace
from typing import Self

from chainchess.core.models import ClockModel


@dataclass(frozen=True)
class PlayerClock:
    remaining: float
    increment: float
    last_update: float

    @classmethod
    def start(cls, base_seconds: float, increment: float, now: float) -> Self:
        return cls(remaining=base_seconds, increment=increment, last_update=now)

    @classmethod
    def from_model(cls, model: ClockModel) -> Self:
        return cls(model.remaining, model.increment, model.last_update)

    def to_model(self) -> ClockModel:
        return ClockModel(self.remaining, self.increment, self.last_update)


def tick(clock: PlayerClock, now: float) -> float:
    """Time left at `now`, assuming this clock has been running since its last update. Negative once flagged."""
    return clock.remaining - (now - clock.last_update)


def credit(clock: PlayerClock, remaining: float, now: float) -> PlayerClock:
    """Store the time left after a move and add the increment."""
    return replace(clock, remaining=remaining + clock.increment, last_update=now)


def restart(clock: PlayerClock, now: float) -> PlayerClock:
    """Start counting down from `now` (the opponent just moved)"""
    return replace(clock, last_update=now)


def settle(clock: PlayerClock, now: float) -> PlayerClock:
    """Freeze the clock at the time left at `now` (game is over)"""
    return replace(clock, remaining=tick(clock, now), last_update=now)
