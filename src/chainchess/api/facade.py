"""
The outer surface of the package.

Every operation returns an OperationResult: the view on success, or the error kind and message when the request was
rejected. Only GameError (the errors callers can cause) is turned into a result, anything else propagates.
"""

import logging
from typing import Callable, Optional, Self

from pydantic import BaseModel
from sqlalchemy.orm import Session

from chainchess.api.models import (
    GameRequest,
    LobbyJoinRequest,
    MoveRequest,
    NewGameRequest,
    OperationResult,
)
from chainchess.core.config import Settings, get_settings
from chainchess.core.context import CallContext
from chainchess.core.exceptions import GameError
from chainchess.core.models import Address
from chainchess.core.shared_types import Category
from chainchess.db.memory_repository import (
    InMemoryGameRepository,
    InMemoryLobbyRepository,
    InMemoryRatingRepository,
)
from chainchess.db.sql_repository import (
    SQLGameRepository,
    SQLLobbyRepository,
    SQLRatingRepository,
)
from chainchess.services.chess_service import ChessService
from chainchess.services.lobby_service import LobbyService
from chainchess.services.rating_service import RatingService

logger = logging.getLogger(__name__)


class ChessApi:
    def __init__(
        self,
        chess: ChessService,
        ratings: RatingService,
        lobby: LobbyService,
    ) -> None:
        self.chess = chess
        self.ratings = ratings
        self.lobby = lobby

    @classmethod
    def in_memory(cls, settings: Optional[Settings] = None) -> Self:
        settings = settings or get_settings()
        ratings = RatingService(InMemoryRatingRepository(), settings)
        chess = ChessService(InMemoryGameRepository(), ratings, settings)
        lobby = LobbyService(InMemoryLobbyRepository(), chess, settings)
        return cls(chess, ratings, lobby)

    @classmethod
    def with_session(cls, session: Session, settings: Optional[Settings] = None) -> Self:
        settings = settings or get_settings()
        ratings = RatingService(SQLRatingRepository(session), settings)
        chess = ChessService(SQLGameRepository(session), ratings, settings)
        lobby = LobbyService(SQLLobbyRepository(session), chess, settings)
        return cls(chess, ratings, lobby)

    # --- GAMES ---
    def new_game(self, ctx: CallContext, request: NewGameRequest) -> OperationResult:
        return self._run("new_game", lambda: self.chess.new_game(ctx, request))

    def make_move(self, ctx: CallContext, request: MoveRequest) -> OperationResult:
        return self._run("make_move", lambda: self.chess.make_move(ctx, request))

    def draw_offer(self, ctx: CallContext, request: GameRequest) -> OperationResult:
        return self._run("draw_offer", lambda: self.chess.draw_offer(ctx, request))

    def draw(self, ctx: CallContext, request: GameRequest) -> OperationResult:
        return self._run("draw", lambda: self.chess.draw(ctx, request))

    def resign(self, ctx: CallContext, request: GameRequest) -> OperationResult:
        return self._run("resign", lambda: self.chess.resign(ctx, request))

    def claim_timeout(self, ctx: CallContext, request: GameRequest) -> OperationResult:
        return self._run("claim_timeout", lambda: self.chess.claim_timeout(ctx, request))

    def get_game(
        self, request: GameRequest, now: Optional[float] = None
    ) -> OperationResult:
        return self._run("get_game", lambda: self.chess.get_game(request, now))

    # --- PLAYERS ---
    def get_player(self, address: Address) -> OperationResult:
        return self._run("get_player", lambda: self.ratings.get_player(address))

    def leaderboard(self, category: Category) -> OperationResult:
        return self._run("leaderboard", lambda: self.ratings.leaderboard(category))

    # --- LOBBY ---
    def lobby_join(self, ctx: CallContext, request: LobbyJoinRequest) -> OperationResult:
        return self._run("lobby_join", lambda: self.lobby.join(ctx, request))

    def lobby_game_found(self, ctx: CallContext) -> OperationResult:
        return self._run("lobby_game_found", lambda: self.lobby.game_found(ctx))

    def lobby_leave(self, ctx: CallContext) -> OperationResult:
        return self._run("lobby_leave", lambda: self.lobby.leave(ctx))

    def _run(self, name: str, operation: Callable[[], BaseModel]) -> OperationResult:
        try:
            view = operation()
        except GameError as error:
            logger.warning("%s rejected: %s: %s", name, type(error).__name__, error)
            return OperationResult(
                ok=False, error=type(error).__name__, message=str(error)
            )
        return OperationResult(ok=True, value=view)
