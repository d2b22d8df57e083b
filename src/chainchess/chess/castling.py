"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from chainchess.chess.pieces import Color
from chainchess.chess.square import Square


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)

DIRECTIONS_BY_COLOR: dict[Color, tuple[CastlingDirection, CastlingDirection]] = {
    Color.WHITE: (
        CastlingDirection.WHITE_KING_SIDE,
        CastlingDirection.WHITE_QUEEN_SIDE,
    ),
    Color.BLACK: (
        CastlingDirection.BLACK_KING_SIDE,
        CastlingDirection.BLACK_QUEEN_SIDE,
    ),
}


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def squares_between(self) -> list[Square]:
        """Squares between king and rook. All of them must be empty to castle."""
        low, high = sorted([self.king_from.file, self.rook_from.file])
        return [Square(file, self.king_from.rank) for file in range(low + 1, high)]

    def king_path(self) -> list[Square]:
        """Squares the king stands on, passes, and lands on. None of them may be under attack."""
        step = 1 if self.king_to.file > self.king_from.file else -1
        return [
            Square(file, self.king_from.rank)
            for file in range(self.king_from.file, self.king_to.file + step, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_from_fen(castle_fen: str) -> frozenset[CastlingDirection]:
    """parse the part of the FEN string that encodes castling rights"""
    return frozenset(
        direction for direction in CastlingDirection if direction.value in castle_fen
    )


def castling_to_fen(castling_rights: frozenset[CastlingDirection]) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if direction in castling_rights]
    )
    return castling_chars or "-"


def direction_for_king_move(
    king_from: Square, king_to: Square
) -> CastlingDirection | None:
    """A king move that matches one of the castling rules exactly is a castling move."""
    for direction, squares in CASTLING_RULES.items():
        if squares.king_from == king_from and squares.king_to == king_to:
            return direction
    return None


def direction_for_rook_square(square: Square) -> CastlingDirection | None:
    """Which castling right depends on a rook standing on this square"""
    for direction, squares in CASTLING_RULES.items():
        if squares.rook_from == square:
            return direction
    return None
