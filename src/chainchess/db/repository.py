"""Protocol repositories. The services only depend on these; storage can be in memory or SQL."""

from typing import Protocol
from uuid import UUID

from chainchess.core.models import (
    Address,
    GameModel,
    LobbyEntryModel,
    LobbyMatchModel,
    PlayerRatingModel,
)


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        ...

    def find_open_game(self, white: Address, black: Address) -> UUID | None:
        """ID of a game in state 'open' with exactly this white and black player."""
        ...


class RatingRepository(Protocol):
    def get_leaderboard(self, category: str) -> list[PlayerRatingModel]:
        """All ratings of a category, ordered by leaderboard position."""
        ...

    def get_player_ratings(self, address: Address) -> list[PlayerRatingModel]:
        """The records of a player, one per category played."""
        ...

    def save_ratings(self, ratings: list[PlayerRatingModel]) -> None:
        """Insert or update the records (keyed by address + category)."""
        ...


class LobbyRepository(Protocol):
    def get_queue(self, category: str) -> list[LobbyEntryModel]:
        """Waiting players of a category, in order of arrival."""
        ...

    def save_queue(self, category: str, entries: list[LobbyEntryModel]) -> None:
        """Replace the waiting queue of a category."""
        ...

    def get_match(self, address: Address) -> LobbyMatchModel | None:
        ...

    def save_match(self, match: LobbyMatchModel) -> None:
        ...

    def delete_match(self, address: Address) -> None:
        ...
