"""Unit tests for chainchess/chess/square.py"""

from string import ascii_lowercase

import pytest

from chainchess.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square, is_valid_square


@pytest.mark.parametrize(
    "file, rank, notation",
    [
        (file, rank, f"{ascii_lowercase[file - 1]}{rank}")
        for file in range(1, 9)
        for rank in range(1, 9)
    ],
)
def test_creating_from_algebraic(file: int, rank: int, notation: str) -> None:
    """Simply checks if the notation for 'a1' indeed maps to file 1, rank 1, etc."""
    square = Square.from_algebraic(notation)
    assert square.file == file
    assert square.rank == rank
    assert square.to_algebraic() == notation


def test_square_within_bounds() -> None:
    """happy case: every square of the board"""
    for file in range(1, BOARD_DIMENSIONS[0] + 1):
        for rank in range(1, BOARD_DIMENSIONS[1] + 1):
            assert Square(file, rank).is_within_bounds()


def test_square_out_of_bounds() -> None:
    assert not Square(BOARD_DIMENSIONS[0] + 1, BOARD_DIMENSIONS[1] + 1).is_within_bounds()
    assert not Square(0, 4).is_within_bounds()
    assert not Square(-1, -1).is_within_bounds()


def test_offset() -> None:
    assert Square.from_algebraic("e2").offset(0, 2) == Square.from_algebraic("e4")
    assert Square.from_algebraic("a1").offset(-1, 0) == Square(0, 1)


@pytest.mark.parametrize(
    "notation, expected",
    [
        ("a1", True),
        ("h8", True),
        ("e4", True),
        ("i1", False),
        ("a9", False),
        ("a0", False),
        ("A1", False),
        ("a", False),
        ("", False),
        ("a10", False),
    ],
)
def test_is_valid_square(notation: str, expected: bool) -> None:
    assert is_valid_square(notation) is expected


def test_all_squares_cover_the_board() -> None:
    assert len(ALL_SQUARES) == 64
    assert len(set(ALL_SQUARES)) == 64
