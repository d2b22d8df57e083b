"""
Type definitions used across layers
"""

from enum import StrEnum


class GameState(StrEnum):
    """Values are part of the rendered game view and must not change."""

    OPEN = "open"
    CHECKMATED = "checkmated"
    STALEMATED = "stalemated"
    RESIGNED = "resigned"
    DRAWN_BY_AGREEMENT = "drawn_by_agreement"
    TIMEOUT = "timeout"
    ABORTED = "aborted"


DECISIVE_STATES = frozenset(
    {GameState.CHECKMATED, GameState.RESIGNED, GameState.TIMEOUT}
)
DRAWN_STATES = frozenset({GameState.STALEMATED, GameState.DRAWN_BY_AGREEMENT})


class BoardStatus(StrEnum):
    NORMAL = "normal"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


class Category(StrEnum):
    """Time-control buckets. Ratings and lobby queues are kept per category."""

    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    CLASSICAL = "classical"
