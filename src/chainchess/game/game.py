"""
The Game class is the entrypoint into the domain layer for the service layer.

It owns the lifecycle of a single game: turn order, clocks, draw offers, resignation and timeouts.
Position changes are delegated to the move engine. Once the state leaves `open` nothing can change anymore.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from chainchess.chess import engine
from chainchess.chess.moves import Move
from chainchess.chess.pieces import Color, opponent
from chainchess.chess.position import Position
from chainchess.core.exceptions import (
    GameNotOpenError,
    GameStateError,
    InvalidOpponentError,
    NoDrawOfferError,
    NotParticipantError,
    NotYourTurnError,
    NoTimeoutError,
)
from chainchess.core.models import Address, GameModel
from chainchess.core.shared_types import (
    DECISIVE_STATES,
    DRAWN_STATES,
    BoardStatus,
    Category,
    GameState,
)
from chainchess.game.clock import PlayerClock, credit, restart, settle, tick
from chainchess.game.time_control import TimeControl

ABORT_THRESHOLD_PLIES = 2
PLAYER_COLORS: tuple[Color, Color] = (Color.WHITE, Color.BLACK)


def color_name(color: Color) -> str:
    return color.name.lower()


@dataclass(frozen=True)
class GameOutcome:
    """What the rating system needs to know about a finished game. `white_score` is 1, 0.5 or 0."""

    white: Address
    black: Address
    category: Category
    white_score: float


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    position: Position
    moves: list[Move]
    players: dict[Color, Address]
    clocks: dict[Color, PlayerClock]
    time_control: TimeControl
    state: GameState
    draw_offerer: Optional[Address] = None
    concluder: Optional[Address] = None
    winner: Optional[Address] = None
    created_at: float = 0.0
    abort_threshold_plies: int = field(default=ABORT_THRESHOLD_PLIES, compare=False)

    @classmethod
    def new_game(
        cls,
        white: Address,
        black: Address,
        time_control: TimeControl,
        now: float,
        starting_fen: Optional[str] = None,
        abort_threshold_plies: int = ABORT_THRESHOLD_PLIES,
    ) -> Self:
        """The challenger plays white. Both clocks start with the full base time."""
        if white == black:
            raise InvalidOpponentError(f"Cannot start a game against yourself ({white}).")

        position = (
            Position.from_fen(starting_fen)
            if starting_fen
            else Position.starting_position()
        )
        return cls(
            position=position,
            moves=[],
            players={Color.WHITE: white, Color.BLACK: black},
            clocks={
                color: PlayerClock.start(
                    time_control.base_seconds, time_control.increment_seconds, now
                )
                for color in PLAYER_COLORS
            },
            time_control=time_control,
            state=GameState.OPEN,
            created_at=now,
            abort_threshold_plies=abort_threshold_plies,
        )

    @classmethod
    def from_model(
        cls, model: GameModel, abort_threshold_plies: int = ABORT_THRESHOLD_PLIES
    ) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        if model.state not in {state.value for state in GameState}:
            raise GameStateError(
                f"Invalid state: {model.state!r}. \nPick one from {','.join(GameState)}"
            )

        return cls(
            position=Position.from_fen(model.current_fen),
            moves=[Move.from_lan(lan) for lan in model.moves_lan],
            players={color: model.players[color_name(color)] for color in PLAYER_COLORS},
            clocks={
                color: PlayerClock.from_model(model.clocks[color_name(color)])
                for color in PLAYER_COLORS
            },
            time_control=TimeControl(model.base_seconds, model.increment_seconds),
            state=GameState(model.state),
            draw_offerer=model.draw_offerer,
            concluder=model.concluder,
            winner=model.winner,
            created_at=model.created_at,
            abort_threshold_plies=abort_threshold_plies,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=engine.serialize(self.position),
            moves_lan=[engine.serialize_lan(move) for move in self.moves],
            players={color_name(color): self.players[color] for color in PLAYER_COLORS},
            clocks={
                color_name(color): self.clocks[color].to_model()
                for color in PLAYER_COLORS
            },
            base_seconds=self.time_control.base_seconds,
            increment_seconds=self.time_control.increment_seconds,
            category=self.time_control.category,
            state=self.state,
            draw_offerer=self.draw_offerer,
            concluder=self.concluder,
            winner=self.winner,
            created_at=self.created_at,
        )

    # --- QUERIES ---
    @property
    def is_open(self) -> bool:
        return self.state == GameState.OPEN

    @property
    def white(self) -> Address:
        return self.players[Color.WHITE]

    @property
    def black(self) -> Address:
        return self.players[Color.BLACK]

    @property
    def outcome(self) -> Optional[GameOutcome]:
        """None while the game is open, and for aborted games (those never count for ratings)."""
        if self.state in DECISIVE_STATES:
            white_score = 1.0 if self.winner == self.white else 0.0
        elif self.state in DRAWN_STATES:
            white_score = 0.5
        else:
            return None
        return GameOutcome(
            self.white, self.black, self.time_control.category, white_score
        )

    def color_of(self, player: Address) -> Color:
        for color, address in self.players.items():
            if address == player:
                return color
        raise NotParticipantError(f"{player} is not playing in this game.")

    def opponent_of(self, player: Address) -> Address:
        return self.players[opponent(self.color_of(player))]

    def remaining_time(self, color: Color, now: float) -> float:
        """Only the clock of the side to move is running."""
        clock = self.clocks[color]
        if self.is_open and color == self.position.color_to_move:
            return tick(clock, now)
        return clock.remaining

    # --- COMMANDS ---
    def make_move(self, player: Address, move_lan: str, now: float) -> None:
        """
        Attempt to make a move
        -----

        1. make sure the game is open and it is your turn
        2. parse the move
        3. run your clock: flagged? --> the game ends (aborted or lost on time) and the move is NOT played
        4. play the move, credit your increment, start the opponent's clock
        5. checkmate / stalemate ends the game
        """
        color = self.color_of(player)
        self._assert_open()
        if color != self.position.color_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.players[self.position.color_to_move]} to make a move first."
            )

        move = engine.parse_lan(move_lan)

        remaining = tick(self.clocks[color], now)
        if remaining <= 0:
            self._flag_fall(color, concluder=player, now=now)
            return

        self.position = engine.apply_move(self.position, move)
        self.moves.append(move)
        self.clocks[color] = credit(self.clocks[color], remaining, now)
        self.clocks[opponent(color)] = restart(self.clocks[opponent(color)], now)

        board_status = engine.status(self.position)
        if board_status == BoardStatus.CHECKMATE:
            self._conclude(GameState.CHECKMATED, concluder=player, winner=player)
        elif board_status == BoardStatus.STALEMATE:
            self._conclude(GameState.STALEMATED, concluder=player, winner=None)

    def offer_draw(self, player: Address) -> None:
        self.color_of(player)
        self._assert_open()
        self.draw_offerer = player

    def accept_draw(self, player: Address) -> None:
        """Only the opponent of whoever offered the draw can accept it. The offer stays on record."""
        self.color_of(player)
        self._assert_open()
        if self.draw_offerer is None or self.draw_offerer == player:
            raise NoDrawOfferError(
                f"There is no draw offer from the opponent of {player} to accept."
            )
        self._conclude(GameState.DRAWN_BY_AGREEMENT, concluder=player, winner=None)

    def resign(self, player: Address) -> None:
        self.color_of(player)
        self._assert_open()
        self._conclude(
            GameState.RESIGNED, concluder=player, winner=self.opponent_of(player)
        )

    def claim_timeout(self, player: Address, now: float) -> None:
        """The running clock is the one of the side to move. Only their opponent may claim."""
        claimant = self.color_of(player)
        self._assert_open()
        running = self.position.color_to_move
        if running == claimant:
            raise NoTimeoutError(
                f"{player} is to move and cannot claim a timeout on their own clock."
            )
        if tick(self.clocks[running], now) > 0:
            raise NoTimeoutError(
                f"No clock has run out: {self.players[running]} still has {tick(self.clocks[running], now):.1f}s."
            )
        self._flag_fall(running, concluder=player, now=now)

    # -- PRIVATE HELPERS ---
    def _assert_open(self) -> None:
        if not self.is_open:
            raise GameNotOpenError(f"Game is no longer open. state: {self.state}")

    def _flag_fall(self, flagged: Color, concluder: Address, now: float) -> None:
        """
        A flag fell. Before both players completed a full round the game is aborted (no winner, unrated).
        After that it is lost on time.
        """
        self.clocks[flagged] = settle(self.clocks[flagged], now)
        if len(self.moves) < self.abort_threshold_plies:
            self._conclude(GameState.ABORTED, concluder=concluder, winner=None)
        else:
            self._conclude(
                GameState.TIMEOUT,
                concluder=concluder,
                winner=self.players[opponent(flagged)],
            )

    def _conclude(
        self, state: GameState, concluder: Address, winner: Optional[Address]
    ) -> None:
        self.state = state
        self.concluder = concluder
        self.winner = winner
