"""Unit tests for chainchess/services/lobby_service.py"""

import pytest

from chainchess.api.models import GameRequest, LobbyJoinRequest, LobbyStatus
from chainchess.core.context import CallContext
from chainchess.core.exceptions import (
    AlreadyQueuedError,
    InvalidTimeControlError,
)
from chainchess.core.shared_types import Category
from chainchess.db.memory_repository import InMemoryLobbyRepository
from chainchess.services.chess_service import ChessService
from chainchess.services.lobby_service import LobbyService

ALICE = "0xalice"
BOB = "0xbob"
CAROL = "0xcarol"
BLITZ = LobbyJoinRequest(base_seconds=300, increment_seconds=0)
BULLET = LobbyJoinRequest(base_seconds=60, increment_seconds=0)


def test_first_player_waits(lobby_service: LobbyService) -> None:
    view = lobby_service.join(CallContext(ALICE, 0.0), BLITZ)
    assert view.status == LobbyStatus.PENDING
    assert view.category == Category.BLITZ
    assert view.game_id is None
    assert lobby_service.game_found(CallContext(ALICE, 1.0)).game_id is None


def test_second_player_gets_paired(
    lobby_service: LobbyService, chess_service: ChessService
) -> None:
    lobby_service.join(CallContext(ALICE, 0.0), LobbyJoinRequest(base_seconds=240, increment_seconds=3))
    view = lobby_service.join(CallContext(BOB, 5.0), BLITZ)

    assert view.status == LobbyStatus.MATCHED
    assert view.game_id is not None

    # the player that waited plays white, with their own time control
    game = chess_service.get_game(GameRequest(game_id=view.game_id))
    assert game.white == ALICE
    assert game.black == BOB
    assert game.white_time == 240
    assert game.category == Category.BLITZ

    assert lobby_service.game_found(CallContext(ALICE, 6.0)).game_id == view.game_id
    # polling again returns the same game
    assert lobby_service.game_found(CallContext(ALICE, 7.0)).game_id == view.game_id
    assert lobby_service.game_found(CallContext(BOB, 7.0)).game_id == view.game_id


def test_categories_do_not_mix(lobby_service: LobbyService) -> None:
    lobby_service.join(CallContext(ALICE, 0.0), BLITZ)
    view = lobby_service.join(CallContext(BOB, 1.0), BULLET)
    assert view.status == LobbyStatus.PENDING
    assert view.category == Category.BULLET


def test_first_in_first_out(lobby_service: LobbyService, chess_service: ChessService) -> None:
    lobby_service.join(CallContext(ALICE, 0.0), BLITZ)
    lobby_service.leave(CallContext(ALICE, 1.0))
    lobby_service.join(CallContext(BOB, 2.0), BLITZ)
    view = lobby_service.join(CallContext(CAROL, 3.0), BLITZ)

    game = chess_service.get_game(GameRequest(game_id=view.game_id))
    assert (game.white, game.black) == (BOB, CAROL)


def test_cannot_queue_twice(lobby_service: LobbyService) -> None:
    lobby_service.join(CallContext(ALICE, 0.0), BLITZ)
    with pytest.raises(AlreadyQueuedError):
        lobby_service.join(CallContext(ALICE, 1.0), BLITZ)
    with pytest.raises(AlreadyQueuedError):
        lobby_service.join(CallContext(ALICE, 1.0), BULLET)


def test_match_must_be_retrieved_before_joining_again(lobby_service: LobbyService) -> None:
    lobby_service.join(CallContext(ALICE, 0.0), BLITZ)
    lobby_service.join(CallContext(BOB, 1.0), BLITZ)

    with pytest.raises(AlreadyQueuedError):
        lobby_service.join(CallContext(ALICE, 2.0), BULLET)

    lobby_service.game_found(CallContext(ALICE, 3.0))
    view = lobby_service.join(CallContext(ALICE, 4.0), BULLET)
    assert view.status == LobbyStatus.PENDING
    # joining again clears the old match
    assert lobby_service.game_found(CallContext(ALICE, 5.0)).game_id is None


def test_invalid_time_control(lobby_service: LobbyService) -> None:
    with pytest.raises(InvalidTimeControlError):
        lobby_service.join(
            CallContext(ALICE, 0.0), LobbyJoinRequest(base_seconds=60, increment_seconds=-2)
        )


def test_stale_entries_are_dropped(lobby_service: LobbyService) -> None:
    lobby_service.join(CallContext(ALICE, 0.0), BLITZ)
    view = lobby_service.join(CallContext(BOB, 301.0), BLITZ)
    assert view.status == LobbyStatus.PENDING
    # ALICE is free to queue again
    assert lobby_service.join(CallContext(ALICE, 302.0), BLITZ).status == LobbyStatus.MATCHED


def test_leave(lobby_service: LobbyService, lobby_repository: InMemoryLobbyRepository) -> None:
    lobby_service.join(CallContext(ALICE, 0.0), BULLET)
    assert lobby_service.leave(CallContext(ALICE, 1.0)).left
    assert lobby_repository.get_queue("bullet") == []
    assert not lobby_service.leave(CallContext(ALICE, 2.0)).left


def test_open_game_passes_over_waiting_opponent(
    lobby_service: LobbyService,
    lobby_repository: InMemoryLobbyRepository,
    chess_service: ChessService,
) -> None:
    """Two players whose first game is still open are not paired again. Both wait for somebody else"""
    lobby_service.join(CallContext(ALICE, 0.0), BLITZ)
    lobby_service.join(CallContext(BOB, 1.0), BLITZ)
    lobby_service.game_found(CallContext(ALICE, 2.0))

    lobby_service.join(CallContext(ALICE, 3.0), BLITZ)
    view = lobby_service.join(CallContext(BOB, 4.0), BLITZ)
    assert view.status == LobbyStatus.PENDING
    assert view.game_id is None
    assert [entry.address for entry in lobby_repository.get_queue("blitz")] == [ALICE, BOB]

    # the next newcomer gets the longest waiting player
    view = lobby_service.join(CallContext(CAROL, 5.0), BLITZ)
    assert view.status == LobbyStatus.MATCHED
    game = chess_service.get_game(GameRequest(game_id=view.game_id))
    assert (game.white, game.black) == (ALICE, CAROL)
    assert [entry.address for entry in lobby_repository.get_queue("blitz")] == [BOB]
