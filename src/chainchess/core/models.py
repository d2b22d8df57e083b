"""
Boundary layer data model(s).

These objects are what the Services send to and receive from the repositories.
Domain objects convert from/to them, so the storage layer never needs to know about boards or clocks.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

# Type aliases to make the models easier to read
Address = str
PieceColor = str


@dataclass
class ClockModel:
    remaining: float
    increment: float
    last_update: float


@dataclass
class GameModel:
    """Transport-safe representation of a chess game."""

    current_fen: str
    moves_lan: list[str]
    players: dict[PieceColor, Address]
    clocks: dict[PieceColor, ClockModel]
    base_seconds: float
    increment_seconds: float
    category: str
    state: str
    draw_offerer: Optional[Address] = None
    concluder: Optional[Address] = None
    winner: Optional[Address] = None
    created_at: float = 0.0


@dataclass
class PlayerRatingModel:
    address: Address
    category: str
    rating: int
    wins: int = 0
    losses: int = 0
    draws: int = 0
    position: int = 0


@dataclass
class LobbyEntryModel:
    address: Address
    base_seconds: float
    increment_seconds: float
    joined_at: float


@dataclass
class LobbyMatchModel:
    address: Address
    game_id: UUID
    category: str
    retrieved: bool = False
