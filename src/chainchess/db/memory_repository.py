"""
Repositories backed by plain (insertion ordered) dictionaries.

Every read and write copies the models, so nothing a service does to a loaded model reaches the store
until it is saved explicitly.
"""

from copy import deepcopy
from uuid import UUID, uuid4

from chainchess.core.models import (
    Address,
    GameModel,
    LobbyEntryModel,
    LobbyMatchModel,
    PlayerRatingModel,
)
from chainchess.core.shared_types import GameState


class InMemoryGameRepository:
    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def get_game(self, game_id: UUID) -> GameModel | None:
        game = self._games.get(game_id)
        return deepcopy(game) if game is not None else None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_id = uuid4()
        self._games[game_id] = deepcopy(game)
        return deepcopy(game), game_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        if game_id not in self._games:
            return None
        self._games[game_id] = deepcopy(game)
        return deepcopy(game)

    def find_open_game(self, white: Address, black: Address) -> UUID | None:
        for game_id, game in self._games.items():
            if (
                game.state == GameState.OPEN
                and game.players.get("white") == white
                and game.players.get("black") == black
            ):
                return game_id
        return None

    def clear(self) -> None:
        self._games.clear()


class InMemoryRatingRepository:
    def __init__(self) -> None:
        self._ratings: dict[tuple[Address, str], PlayerRatingModel] = {}

    def get_leaderboard(self, category: str) -> list[PlayerRatingModel]:
        entries = [
            deepcopy(rating)
            for (_, rating_category), rating in self._ratings.items()
            if rating_category == category
        ]
        return sorted(entries, key=lambda rating: rating.position)

    def get_player_ratings(self, address: Address) -> list[PlayerRatingModel]:
        return [
            deepcopy(rating)
            for (rating_address, _), rating in self._ratings.items()
            if rating_address == address
        ]

    def save_ratings(self, ratings: list[PlayerRatingModel]) -> None:
        for rating in ratings:
            self._ratings[(rating.address, str(rating.category))] = deepcopy(rating)

    def clear(self) -> None:
        self._ratings.clear()


class InMemoryLobbyRepository:
    def __init__(self) -> None:
        self._queues: dict[str, list[LobbyEntryModel]] = {}
        self._matches: dict[Address, LobbyMatchModel] = {}

    def get_queue(self, category: str) -> list[LobbyEntryModel]:
        return deepcopy(self._queues.get(category, []))

    def save_queue(self, category: str, entries: list[LobbyEntryModel]) -> None:
        self._queues[category] = deepcopy(entries)

    def get_match(self, address: Address) -> LobbyMatchModel | None:
        match = self._matches.get(address)
        return deepcopy(match) if match is not None else None

    def save_match(self, match: LobbyMatchModel) -> None:
        self._matches[match.address] = deepcopy(match)

    def delete_match(self, address: Address) -> None:
        self._matches.pop(address, None)

    def clear(self) -> None:
        self._queues.clear()
        self._matches.clear()
