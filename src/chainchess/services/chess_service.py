"""Orchestration of communication from the boundary to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from chainchess.api.models import GameRequest, GameView, MoveRequest, NewGameRequest
from chainchess.chess.engine import build_lan
from chainchess.chess.pieces import Color
from chainchess.core.config import Settings, get_settings
from chainchess.core.context import CallContext
from chainchess.core.exceptions import GameNotFoundError, OngoingGameError
from chainchess.core.models import Address, GameModel
from chainchess.db.repository import GameRepository
from chainchess.game.game import Game
from chainchess.game.time_control import TimeControl
from chainchess.services.rating_service import RatingService

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess games."""

    def __init__(
        self,
        repository: GameRepository,
        rating_service: RatingService,
        settings: Optional[Settings] = None,
    ) -> None:
        self.repo = repository
        self.ratings = rating_service
        self.settings = settings or get_settings()

    def has_open_game(self, white: Address, black: Address) -> bool:
        return self.repo.find_open_game(white, black) is not None

    def new_game(self, ctx: CallContext, request: NewGameRequest) -> GameView:
        """The caller challenges `opponent` and plays white."""
        time_control = TimeControl.validated(
            request.base_seconds, request.increment_seconds
        )
        if self.has_open_game(ctx.caller, request.opponent):
            raise OngoingGameError(
                f"game with opponent is still ongoing ({ctx.caller} vs {request.opponent})"
            )

        game = Game.new_game(
            white=ctx.caller,
            black=request.opponent,
            time_control=time_control,
            now=ctx.now,
            starting_fen=request.starting_fen,
            abort_threshold_plies=self.settings.abort_threshold_plies,
        )
        stored_game, game_id = self.repo.create_game(game.to_model())
        logger.info(
            "Game %s created: %s vs %s (%s, %s+%s)",
            game_id,
            ctx.caller,
            request.opponent,
            time_control.category,
            time_control.base_seconds,
            time_control.increment_seconds,
        )
        return self._create_game_view(game_id, self._to_game(stored_game), ctx.now)

    def make_move(self, ctx: CallContext, request: MoveRequest) -> GameView:
        """Make a move attempt. A flagged mover ends the game instead (no error, the move is just not played)."""
        move_lan = build_lan(request.from_square, request.to_square, request.promote_to)
        game = self._fetch_game(request.game_id)
        game.make_move(ctx.caller, move_lan, ctx.now)
        return self._store(request.game_id, game, ctx.now)

    def draw_offer(self, ctx: CallContext, request: GameRequest) -> GameView:
        game = self._fetch_game(request.game_id)
        game.offer_draw(ctx.caller)
        return self._store(request.game_id, game, ctx.now)

    def draw(self, ctx: CallContext, request: GameRequest) -> GameView:
        """Accept the opponent's draw offer."""
        game = self._fetch_game(request.game_id)
        game.accept_draw(ctx.caller)
        return self._store(request.game_id, game, ctx.now)

    def resign(self, ctx: CallContext, request: GameRequest) -> GameView:
        game = self._fetch_game(request.game_id)
        game.resign(ctx.caller)
        return self._store(request.game_id, game, ctx.now)

    def claim_timeout(self, ctx: CallContext, request: GameRequest) -> GameView:
        game = self._fetch_game(request.game_id)
        game.claim_timeout(ctx.caller, ctx.now)
        return self._store(request.game_id, game, ctx.now)

    def get_game(self, request: GameRequest, now: Optional[float] = None) -> GameView:
        """
        Retrieve current game state.
        ----
        With `now` the clock of the side to move shows the time left at that moment, otherwise as of the last move.
        """
        game = self._fetch_game(request.game_id)
        return self._create_game_view(request.game_id, game, now)

    # -- Internal helpers --
    def _store(self, game_id: UUID, game: Game, now: float) -> GameView:
        """Persist the game. If this call ended it, the result goes to the rating system."""
        self.repo.update_game(game_id, game.to_model())
        if not game.is_open:
            logger.info(
                "Game %s ended: %s (concluder=%s, winner=%s)",
                game_id,
                game.state,
                game.concluder,
                game.winner,
            )
            outcome = game.outcome
            if outcome is not None:
                self.ratings.record(outcome)
        return self._create_game_view(game_id, game, now)

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return self._to_game(game_model)

    def _to_game(self, model: GameModel) -> Game:
        return Game.from_model(
            model, abort_threshold_plies=self.settings.abort_threshold_plies
        )

    def _create_game_view(
        self, game_id: UUID, game: Game, now: Optional[float]
    ) -> GameView:
        def time_left(color: Color) -> float:
            if now is None:
                return game.clocks[color].remaining
            return game.remaining_time(color, now)

        model = game.to_model()
        return GameView(
            game_id=game_id,
            state=game.state,
            white=game.white,
            black=game.black,
            concluder=game.concluder,
            winner=game.winner,
            draw_offerer=game.draw_offerer,
            position=model.current_fen,
            moves=model.moves_lan,
            white_time=time_left(Color.WHITE),
            black_time=time_left(Color.BLACK),
            category=game.time_control.category,
        )
