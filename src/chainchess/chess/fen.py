"""
Validation of FEN strings (Forsyth-Edwards Notation).

<board position string> <active color> <castling rights> <en passant square> <half move clock> <full move number>
"""

from chainchess.chess.pieces import FEN_TO_PIECE
from chainchess.chess.square import BOARD_DIMENSIONS, is_valid_square

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
VALID_CASTLING_ENCODINGS = [
    "-",
    "K",
    "Q",
    "k",
    "q",
    "KQ",
    "Kk",
    "Kq",
    "Qk",
    "Qq",
    "kq",
    "KQk",
    "KQq",
    "Kkq",
    "Qkq",
    "KQkq",
]


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_counter, full_move_counter = parts
    if not is_valid_position(position):
        return False

    if not is_valid_color_code(color):
        return False

    if not is_valid_castling_rights(castling):
        return False

    if not is_valid_en_passant(en_passant):
        return False

    return is_valid_move_counter(half_move_counter) and is_valid_move_counter(
        full_move_counter
    )


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                return False

        if file_count != num_files:
            return False
    return True


def has_legal_piece_counts(position: str) -> bool:
    """Exactly one king per color, and no pawns on the first or last rank."""
    if position.count("K") != 1 or position.count("k") != 1:
        return False
    rank_fens = position.split("/")
    back_ranks = rank_fens[0] + rank_fens[-1]
    return "p" not in back_ranks.lower()


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square that exists on the board or a '-'"""
    return (en_passant == "-") or is_valid_square(en_passant)


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()
