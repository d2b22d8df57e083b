"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the candidate move sets for each piece type.

Legality (not leaving your own king in check, castling, en passant) is checked later by the engine.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from chainchess.chess.pieces import (
    FEN_TO_PIECE,
    PIECE_TO_FEN,
    Color,
    Piece,
    PieceType,
    opponent,
)
from chainchess.chess.square import BOARD_DIMENSIONS, Square, is_valid_square
from chainchess.core.exceptions import InvalidNotationError


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Piece: ...
    def is_empty(self, square: Square) -> bool: ...


Vector = tuple[int, int]

PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]
PROMOTION_LETTERS: dict[str, PieceType] = {
    PIECE_TO_FEN[piece_type]: piece_type for piece_type in PROMOTION_OPTIONS
}


@dataclass(frozen=True)
class Move:
    """
    Origin, destination and (for pawns reaching the last rank) the piece to promote into.

    Whether the move captures, castles, takes en passant or pushes a pawn two squares is derived from the position
    when it gets applied. It is not part of the move itself.
    """

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_lan(cls, lan: str) -> Self:
        """
        Long algebraic notation
        ---

        <from-square><to-square>[promotion-letter]

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles king side
        """
        if len(lan) not in (4, 5):
            raise InvalidNotationError(
                f"Cannot interpret {lan!r} as a move. Expected <from><to>[promotion], e.g. 'e2e4' or 'e7e8q'."
            )

        from_alg, to_alg = lan[:2], lan[2:4]
        for square_alg in (from_alg, to_alg):
            if not is_valid_square(square_alg):
                raise InvalidNotationError(
                    f"Cannot interpret {square_alg!r} in move {lan!r} as a square."
                )

        promote_to: Optional[PieceType] = None
        if len(lan) == 5:
            letter = lan[4]
            if letter not in PROMOTION_LETTERS:
                raise InvalidNotationError(
                    f"Unknown promotion piece {letter!r} in move {lan!r}. Pick one from {','.join(PROMOTION_LETTERS)}."
                )
            promote_to = PROMOTION_LETTERS[letter]

        return cls(
            Square.from_algebraic(from_alg), Square.from_algebraic(to_alg), promote_to
        )

    def to_lan(self) -> str:
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


def promotion_letter(name: str) -> str:
    """Requests may name the promotion piece by letter ('q') or in full ('queen')."""
    lowered = name.strip().lower()
    if lowered in FEN_TO_PIECE:
        return lowered
    for letter, piece_type in PROMOTION_LETTERS.items():
        if piece_type.name.lower() == lowered:
            return letter
    raise InvalidNotationError(f"Unknown promotion piece {name!r}.")


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece or
    the edge of the board. An opponent's piece at the end of the ray can be captured.
    """
    opponent_color = opponent(board.piece(square).color)

    moves: list[Move] = []
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            if not board.is_empty(target_square):
                if board.piece(target_square).color == opponent_color:
                    moves.append(Move(square, target_square))
                break

            moves.append(Move(square, target_square))
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step"""
    player_color = board.piece(square).color
    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        if board.piece(target_square).color != player_color:
            moves.append(Move(square, target_square))

    return moves


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_starting_rank(color: Color) -> int:
    return 2 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 1


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - can move by two from its starting rank, if both squares are empty
    - takes diagonally

    NOTE: En passant and promotions are taken care of by the engine
    """
    player_color = board.piece(square).color
    forward = pawn_direction(player_color)
    moves: list[Move] = []

    one_step = square.offset(0, forward)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        moves.append(Move(square, one_step))
        two_steps = square.offset(0, 2 * forward)
        if square.rank == pawn_starting_rank(player_color) and board.is_empty(
            two_steps
        ):
            moves.append(Move(square, two_steps))

    for df in (-1, 1):
        target_square = square.offset(df, forward)
        if not target_square.is_within_bounds():
            continue
        if board.piece(target_square).color == opponent(player_color):
            moves.append(Move(square, target_square))
    return moves


KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """The Queen combines the rook moves and bishop moves"""
    return raycasting_move(square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled by the engine).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and type(s)?"_
    """
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            if not board.is_empty(target_square):
                piece_found = board.piece(target_square)
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """Single step equivalent of raycasting_attack (pawns, knights, kings)"""
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        if board.piece(target_square) == Piece(by_piece_type, by_color):
            return True

    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. To check if a white pawn could take on your square, look one rank DOWN the board.
    """
    back = -pawn_direction(by_color)
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, [(1, back), (-1, back)]
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


def is_attacked_diagonally(square: Square, by_color: Color, board: Board) -> bool:
    """Bishops and queens share the diagonal rays"""
    return raycasting_attack(
        square, by_color, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS
    )


def is_attacked_straight(square: Square, by_color: Color, board: Board) -> bool:
    """Rooks and queens share the horizontal/vertical rays"""
    return raycasting_attack(
        square, by_color, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS
    )


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_by_king,
    is_attacked_diagonally,
    is_attacked_straight,
]


# -- PAWN PROMOTION MOVES --
def is_pawn_move_to_promotion_square(move: Move, board: Board) -> bool:
    """check if the move is a pawn move and if it reaches either the first or the final rank"""
    is_pawn_move = board.piece(move.from_square).type == PieceType.PAWN
    reaches_promotion_square = move.to_square.rank in [1, BOARD_DIMENSIONS[1]]
    return is_pawn_move and reaches_promotion_square


def pawn_moves_w_promotion(pawn_move: Move) -> list[Move]:
    """Return multiple copies of the pawn move with the piece type to promote into filled in."""
    return [
        Move(pawn_move.from_square, pawn_move.to_square, promote_to=piece_type)
        for piece_type in PROMOTION_OPTIONS
    ]
