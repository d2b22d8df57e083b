"""Unit tests for chainchess/chess/fen.py"""

import pytest

from chainchess.chess.fen import (
    STARTING_FEN,
    has_legal_piece_counts,
    is_valid_castling_rights,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_position,
)


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "8/8/8/8/8/8/8/K6k w - - 12 40",
    ],
)
def test_valid_fen(fen: str) -> None:
    assert is_valid_fen(fen)


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkqK - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e9 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1",
    ],
)
def test_invalid_fen(fen: str) -> None:
    assert not is_valid_fen(fen)


@pytest.mark.parametrize(
    "position, expected",
    [
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", True),
        ("rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR", False),
        ("rnbqkbnr/ppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", False),
        ("rnbqkbnr/pppppppx/8/8/8/8/PPPPPPPP/RNBQKBNR", False),
    ],
)
def test_is_valid_position(position: str, expected: bool) -> None:
    assert is_valid_position(position) is expected


@pytest.mark.parametrize(
    "position, expected",
    [
        ("4k3/8/8/8/8/8/8/4K3", True),
        ("8/8/8/8/8/8/8/4K3", False),
        ("4k3/8/8/8/8/8/8/3KK3", False),
        ("4k2P/8/8/8/8/8/8/4K3", False),
        ("4k3/8/8/8/8/8/8/p3K3", False),
    ],
)
def test_has_legal_piece_counts(position: str, expected: bool) -> None:
    """One king per color, and pawns can never stand on the first or last rank"""
    assert has_legal_piece_counts(position) is expected


def test_castling_and_en_passant_fields() -> None:
    assert is_valid_castling_rights("KQkq")
    assert is_valid_castling_rights("-")
    assert not is_valid_castling_rights("QK")
    assert is_valid_en_passant("-")
    assert is_valid_en_passant("e3")
    assert not is_valid_en_passant("e")
