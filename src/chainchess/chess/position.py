"""
Representation of a single position in a game. Everything that can be encoded in a FEN string.

A Position is never changed in place: the engine creates a new one for every ply.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from chainchess.chess.board import Board
from chainchess.chess.castling import (
    CastlingDirection,
    castling_from_fen,
    castling_to_fen,
)
from chainchess.chess.fen import STARTING_FEN, has_legal_piece_counts, is_valid_fen
from chainchess.chess.pieces import Color
from chainchess.chess.square import Square
from chainchess.core.exceptions import InvalidFENError


@dataclass(frozen=True)
class Position:
    """
    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.

    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces.
        In the starting position: KQkq, and "-" once all rights have been revoked.
    * The en passant square is the square a pawn can take on after a double push. If not available a "-" is used.
    * The half move clock counts the number of plies since the last pawn move or capture.
    * The full move number starts at 1 and increments after every move black makes.

    ex) rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    """

    board: Board = field(compare=False)
    color_to_move: Color
    castling_rights: frozenset[CastlingDirection]
    en_passant_square: Optional[Square]
    half_move_clock: int
    full_move_number: int
    # placement string is what equality is based on (Board itself is a mutable mapping)
    placement: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "placement", self.board.to_fen())

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        (
            placement,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            full_move_number,
        ) = fen.split(" ")

        if not has_legal_piece_counts(placement):
            raise InvalidFENError(
                f"Position needs exactly one king per color and no pawns on the back ranks: {fen}"
            )

        en_passant_square = (
            Square.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        )
        return cls(
            board=Board.from_fen(placement),
            color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
            castling_rights=castling_from_fen(castling_str),
            en_passant_square=en_passant_square,
            half_move_clock=int(half_move_clock),
            full_move_number=int(full_move_number),
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    def to_fen(self) -> str:
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return (
            f"{self.placement} {active_color} {castling_to_fen(self.castling_rights)} "
            f"{en_passant_algebraic} {self.half_move_clock} {self.full_move_number}"
        )
