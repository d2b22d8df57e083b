"""Unit tests for chainchess/api/facade.py"""

from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from chainchess.api.facade import ChessApi
from chainchess.api.models import (
    GameRequest,
    LobbyJoinRequest,
    MoveRequest,
    NewGameRequest,
)
from chainchess.core.config import Settings
from chainchess.core.context import CallContext
from chainchess.core.shared_types import Category

ALICE = "0xalice"
BOB = "0xbob"


def start_game(api: ChessApi, base: float = 300) -> UUID:
    result = api.new_game(
        CallContext(ALICE, 0.0), NewGameRequest(opponent=BOB, base_seconds=base)
    )
    assert result.ok
    return result.value.game_id


def test_successful_operation(api: ChessApi) -> None:
    game_id = start_game(api)
    result = api.make_move(
        CallContext(ALICE, 2.0),
        MoveRequest(game_id=game_id, from_square="e2", to_square="e4"),
    )
    assert result.ok
    assert result.error is None
    text = result.to_text()
    assert "state:open" in text
    assert "moves:e2e4" in text
    assert "position:rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1" in text
    assert "white_time:298.0" in text


def test_rejected_operation_becomes_error_result(api: ChessApi) -> None:
    game_id = start_game(api)
    result = api.make_move(
        CallContext(BOB, 1.0),
        MoveRequest(game_id=game_id, from_square="e7", to_square="e5"),
    )
    assert not result.ok
    assert result.error == "NotYourTurnError"
    assert result.to_text().startswith("error:NotYourTurnError message:")

    result = api.new_game(
        CallContext(ALICE, 0.0),
        NewGameRequest(opponent=BOB, base_seconds=60, increment_seconds=-5),
    )
    assert result.error == "InvalidTimeControlError"
    assert "negative increment invalid" in result.to_text()


def test_unknown_game(api: ChessApi) -> None:
    result = api.get_game(GameRequest(game_id=uuid4()))
    assert result.error == "GameNotFoundError"


def test_game_ending_and_ratings(api: ChessApi) -> None:
    game_id = start_game(api, base=60)
    api.draw_offer(CallContext(ALICE, 1.0), GameRequest(game_id=game_id))
    result = api.draw(CallContext(BOB, 2.0), GameRequest(game_id=game_id))
    assert "state:drawn_by_agreement" in result.to_text()
    assert "draw_offerer:0xalice" in result.to_text()

    # nothing left to do in a finished game
    result = api.resign(CallContext(ALICE, 3.0), GameRequest(game_id=game_id))
    assert result.error == "GameNotOpenError"
    result = api.claim_timeout(CallContext(ALICE, 500.0), GameRequest(game_id=game_id))
    assert result.error == "GameNotOpenError"

    player = api.get_player(BOB)
    assert player.to_text() == (
        "address:0xbob\nbullet rating:1200 wins:0 losses:0 draws:1 position:2"
    )
    assert api.leaderboard(Category.BULLET).value.entries[0].address == ALICE


def test_lobby(api: ChessApi) -> None:
    request = LobbyJoinRequest(base_seconds=60, increment_seconds=1)
    assert api.lobby_join(CallContext(ALICE, 0.0), request).to_text() == (
        "status:pending category:bullet game_id:none"
    )
    assert api.lobby_join(CallContext(ALICE, 1.0), request).error == "AlreadyQueuedError"

    matched = api.lobby_join(CallContext(BOB, 2.0), request)
    assert matched.value.status == "matched"
    found = api.lobby_game_found(CallContext(ALICE, 3.0))
    assert found.value.game_id == matched.value.game_id

    assert api.lobby_leave(CallContext(ALICE, 4.0)).to_text() == "left:false"


def test_in_memory_instances_are_independent() -> None:
    settings = Settings()
    first = ChessApi.in_memory(settings)
    second = ChessApi.in_memory(settings)
    game_id = start_game(first)
    assert first.get_game(GameRequest(game_id=game_id)).ok
    assert second.get_game(GameRequest(game_id=game_id)).error == "GameNotFoundError"


def test_with_session(db_session_repo: Session) -> None:
    api = ChessApi.with_session(db_session_repo, Settings())
    game_id = start_game(api, base=60)
    api.resign(CallContext(BOB, 1.0), GameRequest(game_id=game_id))

    stored = api.get_game(GameRequest(game_id=game_id))
    assert "state:resigned" in stored.to_text()
    assert "winner:0xalice" in stored.to_text()
    assert api.get_player(ALICE).to_text().endswith("position:1")
