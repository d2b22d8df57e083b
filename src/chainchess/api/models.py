"""
Requests and Response models

The response models also know how to render themselves as text. That text is what external callers match against,
so key names and their order are fixed.
"""

from enum import StrEnum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from chainchess.core.exceptions import InvalidRequestError
from chainchess.core.shared_types import Category, GameState

Address = str
NONE_TEXT = "none"


def _text(value: object) -> str:
    return NONE_TEXT if value is None else str(value)


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False
    return value[0].isalpha() and value[1].isnumeric()


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    opponent: Address
    base_seconds: float
    increment_seconds: float = 0
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class GameRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[str] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


class LobbyJoinRequest(BaseModel):
    base_seconds: float
    increment_seconds: float = 0


# --- RESPONSE MODELS ---
class GameView(BaseModel):
    game_id: UUID
    state: GameState
    white: Address
    black: Address
    concluder: Optional[Address]
    winner: Optional[Address]
    draw_offerer: Optional[Address]
    position: str
    moves: list[str]
    white_time: float
    black_time: float
    category: Category

    def to_text(self) -> str:
        lines = [
            f"game_id:{self.game_id}",
            f"state:{self.state}",
            f"white:{self.white}",
            f"black:{self.black}",
            f"concluder:{_text(self.concluder)}",
            f"winner:{_text(self.winner)}",
            f"draw_offerer:{_text(self.draw_offerer)}",
            f"position:{self.position}",
            f"moves:{' '.join(self.moves)}",
            f"white_time:{self.white_time:.1f}",
            f"black_time:{self.black_time:.1f}",
        ]
        return "\n".join(lines)


class CategoryRatingView(BaseModel):
    address: Address
    category: Category
    rating: int
    wins: int
    losses: int
    draws: int
    position: int

    def to_text(self) -> str:
        return (
            f"{self.category} rating:{self.rating} wins:{self.wins} losses:{self.losses} "
            f"draws:{self.draws} position:{self.position}"
        )


class PlayerView(BaseModel):
    address: Address
    ratings: list[CategoryRatingView]

    def to_text(self) -> str:
        return "\n".join(
            [f"address:{self.address}"] + [rating.to_text() for rating in self.ratings]
        )


class LeaderboardView(BaseModel):
    category: Category
    entries: list[CategoryRatingView]

    def to_text(self) -> str:
        return "\n".join(
            [f"category:{self.category}"]
            + [f"{entry.position}. {entry.address} {entry.rating}" for entry in self.entries]
        )


class LobbyStatus(StrEnum):
    PENDING = "pending"
    MATCHED = "matched"


class LobbyJoinView(BaseModel):
    status: LobbyStatus
    category: Category
    game_id: Optional[UUID] = None

    def to_text(self) -> str:
        return f"status:{self.status} category:{self.category} game_id:{_text(self.game_id)}"


class LobbyFoundView(BaseModel):
    game_id: Optional[UUID] = None

    def to_text(self) -> str:
        return f"game_id:{_text(self.game_id)}"


class LobbyLeaveView(BaseModel):
    left: bool

    def to_text(self) -> str:
        return f"left:{str(self.left).lower()}"


class OperationResult(BaseModel):
    """Either the view produced by the operation, or the kind of error plus its message."""

    ok: bool
    value: Any = None
    error: Optional[str] = None
    message: Optional[str] = None

    def to_text(self) -> str:
        if self.ok and self.value is not None:
            return self.value.to_text()
        return f"error:{self.error} message:{self.message}"
