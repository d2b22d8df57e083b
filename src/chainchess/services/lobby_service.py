"""
Matchmaking. Players that do not have a specific opponent in mind wait in the lobby of their time-control category;
the next one to join the same category gets paired with the longest waiting player.
"""

import logging
from typing import Optional

from chainchess.api.models import (
    LobbyFoundView,
    LobbyJoinRequest,
    LobbyJoinView,
    LobbyLeaveView,
    LobbyStatus,
    NewGameRequest,
)
from chainchess.core.config import Settings, get_settings
from chainchess.core.context import CallContext
from chainchess.core.exceptions import AlreadyQueuedError
from chainchess.core.models import Address, LobbyMatchModel
from chainchess.core.shared_types import Category
from chainchess.db.repository import LobbyRepository
from chainchess.game.lobby import LobbyEntry, LobbyQueue
from chainchess.game.time_control import TimeControl
from chainchess.services.chess_service import ChessService

logger = logging.getLogger(__name__)


class LobbyService:
    def __init__(
        self,
        repository: LobbyRepository,
        chess_service: ChessService,
        settings: Optional[Settings] = None,
    ) -> None:
        self.repo = repository
        self.chess = chess_service
        self.settings = settings or get_settings()

    def join(self, ctx: CallContext, request: LobbyJoinRequest) -> LobbyJoinView:
        """
        Join the lobby of the category the time control belongs to
        ----

        1. A player can only wait in one queue at a time, and must have picked up their previous match first.
        2. Somebody waiting? --> the earlier entrant plays white, with the time control they asked for.
           Entrants that still have an open game against the caller are passed over and keep their place.
        3. Nobody (else) waiting? --> queue up and poll `game_found` later.
        """
        time_control = TimeControl.validated(
            request.base_seconds, request.increment_seconds
        )
        category = time_control.category
        self._assert_not_queued(ctx)

        queue = self._load_queue(category, ctx.now)
        waiting = queue.pop_oldest(
            lambda entry: not self.chess.has_open_game(entry.address, ctx.caller)
        )
        if waiting is None:
            queue.append(LobbyEntry(ctx.caller, time_control, ctx.now))
            self.repo.delete_match(ctx.caller)
            self.repo.save_queue(category, queue.to_models())
            logger.info("Lobby %s: %s is waiting", category, ctx.caller)
            return LobbyJoinView(status=LobbyStatus.PENDING, category=category)

        game = self.chess.new_game(
            CallContext(waiting.address, ctx.now),
            NewGameRequest(
                opponent=ctx.caller,
                base_seconds=waiting.time_control.base_seconds,
                increment_seconds=waiting.time_control.increment_seconds,
            ),
        )
        self.repo.save_queue(category, queue.to_models())
        self.repo.save_match(
            LobbyMatchModel(waiting.address, game.game_id, category, retrieved=False)
        )
        # the newcomer receives the game id right away
        self.repo.save_match(
            LobbyMatchModel(ctx.caller, game.game_id, category, retrieved=True)
        )
        logger.info(
            "Lobby %s: paired %s with %s in game %s",
            category,
            waiting.address,
            ctx.caller,
            game.game_id,
        )
        return LobbyJoinView(
            status=LobbyStatus.MATCHED, category=category, game_id=game.game_id
        )

    def game_found(self, ctx: CallContext) -> LobbyFoundView:
        """Poll for a match. Can be called any number of times: the record stays until the player joins again."""
        match = self.repo.get_match(ctx.caller)
        if match is None:
            return LobbyFoundView(game_id=None)
        if not match.retrieved:
            match.retrieved = True
            self.repo.save_match(match)
        return LobbyFoundView(game_id=match.game_id)

    def leave(self, ctx: CallContext) -> LobbyLeaveView:
        for category in Category:
            queue = LobbyQueue.from_models(category, self.repo.get_queue(category))
            if queue.remove(ctx.caller):
                self.repo.save_queue(category, queue.to_models())
                logger.info("Lobby %s: %s left", category, ctx.caller)
                return LobbyLeaveView(left=True)
        return LobbyLeaveView(left=False)

    # -- Internal helpers --
    def _load_queue(self, category: Category, now: float) -> LobbyQueue:
        queue = LobbyQueue.from_models(category, self.repo.get_queue(category))
        for entry in queue.prune(now, self.settings.lobby_entry_ttl):
            logger.info("Lobby %s: dropped stale entry of %s", category, entry.address)
        return queue

    def _is_waiting(self, address: Address, now: float) -> Optional[Category]:
        for category in Category:
            queue = LobbyQueue.from_models(category, self.repo.get_queue(category))
            queue.prune(now, self.settings.lobby_entry_ttl)
            if address in queue:
                return category
        return None

    def _assert_not_queued(self, ctx: CallContext) -> None:
        waiting_in = self._is_waiting(ctx.caller, ctx.now)
        if waiting_in is not None:
            raise AlreadyQueuedError(
                f"{ctx.caller} is already waiting in the {waiting_in} lobby."
            )

        match = self.repo.get_match(ctx.caller)
        if match is not None and not match.retrieved:
            raise AlreadyQueuedError(
                f"{ctx.caller} was already matched into game {match.game_id}. Retrieve it first."
            )
