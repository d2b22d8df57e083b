"""
The move engine implements all rules that turn one Position into the next.

All functions are pure: they never change the Position they are given.
"""

from typing import Optional

from chainchess.chess.board import Board
from chainchess.chess.castling import (
    CASTLING_RULES,
    DIRECTIONS_BY_COLOR,
    CastlingDirection,
    direction_for_king_move,
    direction_for_rook_square,
)
from chainchess.chess.moves import (
    Move,
    is_pawn_move_to_promotion_square,
    pawn_direction,
    pawn_moves_w_promotion,
    promotion_letter,
)
from chainchess.chess.pieces import Color, Piece, PieceType, opponent
from chainchess.chess.position import Position
from chainchess.chess.square import Square, is_valid_square
from chainchess.core.exceptions import IllegalMoveError, InvalidNotationError
from chainchess.core.shared_types import BoardStatus


# --- NOTATION ---
def parse_lan(lan: str) -> Move:
    return Move.from_lan(lan)


def serialize_lan(move: Move) -> str:
    return move.to_lan()


def build_lan(
    from_square_alg: str, to_square_alg: str, promotion: Optional[str] = None
) -> str:
    """Requests carry the squares and the promotion piece separately. Glue them into LAN."""
    for square_alg in (from_square_alg, to_square_alg):
        if not is_valid_square(square_alg):
            raise InvalidNotationError(
                f"Cannot interpret {square_alg!r} as a valid square name."
            )
    letter = promotion_letter(promotion) if promotion else ""
    return f"{from_square_alg}{to_square_alg}{letter}"


def serialize(position: Position) -> str:
    return position.to_fen()


# --- LEGAL MOVES ---
def legal_moves(position: Position) -> set[Move]:
    """
    Set of legal moves for the side to move
    ----

    1. generate candidate moves, using the basic movement rules for all pieces (the board does this calculation)
    2. add castling moves
    3. add en passant moves
    4. remove moves that would put (or leave) you in check
    5. Pawn move to promotion square? --> one move for every piece type the pawn can promote into.
    """
    color = position.color_to_move
    candidate_moves = position.board.generate_candidate_moves(color)
    candidate_moves.extend(_castling_moves(position))
    candidate_moves.extend(_en_passant_moves(position))

    moves: set[Move] = set()
    for move in candidate_moves:
        if _is_putting_yourself_in_check(position, move):
            continue
        if is_pawn_move_to_promotion_square(move, position.board):
            moves.update(pawn_moves_w_promotion(move))
        else:
            moves.add(move)
    return moves


def is_legal(position: Position, move: Move) -> bool:
    return move in legal_moves(position)


def apply_move(position: Position, move: Move) -> Position:
    """Play a move. The resulting Position is returned, the original stays as it was."""
    if not is_legal(position, move):
        raise IllegalMoveError(
            f"Move not allowed: {move.to_lan()} in position {position.to_fen()}"
        )
    return _play(position, move)


def status(position: Position) -> BoardStatus:
    """Checkmate and stalemate both mean: no legal move left. The difference is being in check."""
    in_check = position.board.is_check(position.color_to_move)
    has_moves = bool(legal_moves(position))
    if has_moves:
        return BoardStatus.CHECK if in_check else BoardStatus.NORMAL
    return BoardStatus.CHECKMATE if in_check else BoardStatus.STALEMATE


# -- CASTLING RULE HELPERS ---
def _castling_moves(position: Position) -> list[Move]:
    """
    **you are allowed to castle if**

    * Castling rights in that direction are not yet revoked (king and rook never moved).
    * King and rook still stand on their starting squares.
    * All squares in between king and rook are empty.
    * The king is not in check, and does not pass or land on an attacked square.
    """
    color = position.color_to_move
    board = position.board
    moves: list[Move] = []
    for direction in DIRECTIONS_BY_COLOR[color]:
        if direction not in position.castling_rights:
            continue

        squares = CASTLING_RULES[direction]
        if board.piece(squares.king_from) != Piece(PieceType.KING, color):
            continue
        if board.piece(squares.rook_from) != Piece(PieceType.ROOK, color):
            continue

        if board.is_any_occupied(squares.squares_between()):
            continue

        if board.is_any_under_attack(squares.king_path(), opponent(color)):
            continue

        moves.append(Move(squares.king_from, squares.king_to))
    return moves


def _castling_direction(position: Position, move: Move) -> Optional[CastlingDirection]:
    if position.board.piece(move.from_square).type != PieceType.KING:
        return None
    return direction_for_king_move(move.from_square, move.to_square)


# --- EN PASSANT RULE HELPERS ----
def _en_passant_moves(position: Position) -> list[Move]:
    """Given the en passant square, check the adjacent files one rank behind it for pawns of the side to move."""
    ep_square = position.en_passant_square
    if ep_square is None:
        return []

    color = position.color_to_move
    own_pawn = Piece(PieceType.PAWN, color)
    behind = -pawn_direction(color)
    moves: list[Move] = []
    for df in (-1, 1):
        maybe_pawn_square = ep_square.offset(df, behind)
        if not maybe_pawn_square.is_within_bounds():
            continue
        if position.board.piece(maybe_pawn_square) == own_pawn:
            moves.append(Move(maybe_pawn_square, ep_square))
    return moves


def _is_en_passant(position: Position, move: Move) -> bool:
    return (
        position.board.piece(move.from_square).type == PieceType.PAWN
        and move.to_square == position.en_passant_square
        and move.from_square.file != move.to_square.file
        and position.board.is_empty(move.to_square)
    )


# --- APPLYING MOVES ---
def _is_putting_yourself_in_check(position: Position, move: Move) -> bool:
    board = _board_after(position, move)
    return board.is_check(position.color_to_move)


def _board_after(position: Position, move: Move) -> Board:
    """Move pieces on a copy of the board (king + rook when castling, remove the taken pawn for en passant)"""
    board = position.board.copy()
    direction = _castling_direction(position, move)
    if direction is not None:
        squares = CASTLING_RULES[direction]
        board.move_piece(Move(squares.king_from, squares.king_to))
        board.move_piece(Move(squares.rook_from, squares.rook_to))
        return board

    if _is_en_passant(position, move):
        # The taken pawn stands on the file of the en passant square, on the rank the moving pawn started from
        board.remove_piece(Square(move.to_square.file, move.from_square.rank))

    board.move_piece(move)
    if move.promote_to is not None:
        board.place_piece(
            board.piece(move.to_square).promoted_to(move.promote_to), move.to_square
        )
    return board


def _play(position: Position, move: Move) -> Position:
    """Create the Position after the (already validated) move"""
    color = position.color_to_move
    moving_piece = position.board.piece(move.from_square)
    is_capture = not position.board.is_empty(move.to_square) or _is_en_passant(
        position, move
    )
    is_pawn_move = moving_piece.type == PieceType.PAWN

    return Position(
        board=_board_after(position, move),
        color_to_move=opponent(color),
        castling_rights=_remaining_castling_rights(position, move),
        en_passant_square=_en_passant_target(position, move),
        half_move_clock=0 if (is_pawn_move or is_capture) else position.half_move_clock + 1,
        full_move_number=position.full_move_number + (1 if color == Color.BLACK else 0),
    )


def _remaining_castling_rights(
    position: Position, move: Move
) -> frozenset[CastlingDirection]:
    """
    Checks which rights should get revoked
    ----

    1. If you are moving your king (castling included) --> revoke both
    2. If you are moving a rook from its starting square --> revoke the right in that direction
    3. If you are taking a rook on its starting square --> revoke your opponent's right in that direction
    """
    rights = set(position.castling_rights)
    moving_piece = position.board.piece(move.from_square)

    if moving_piece.type == PieceType.KING:
        rights.difference_update(DIRECTIONS_BY_COLOR[moving_piece.color])

    # any piece leaving or arriving on a rook's starting square ends that right
    for square in (move.from_square, move.to_square):
        direction = direction_for_rook_square(square)
        if direction is not None:
            rights.discard(direction)

    return frozenset(rights)


def _en_passant_target(position: Position, move: Move) -> Optional[Square]:
    """After a double pawn push the square that got jumped over is the en passant square for the next ply."""
    moving_piece = position.board.piece(move.from_square)
    ranks_moved = abs(move.from_square.rank - move.to_square.rank)
    if moving_piece.type != PieceType.PAWN or ranks_moved != 2:
        return None
    return move.from_square.offset(0, pawn_direction(moving_piece.color))
