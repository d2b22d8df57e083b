"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    num_files, num_ranks = BOARD_DIMENSIONS
    if len(square) < 2:
        return False

    file_char, rank_char = square[0], square[1:]
    if file_char not in ascii_lowercase[:num_files]:
        return False

    if not rank_char.isdigit():
        return False

    return 1 <= int(rank_char) <= num_ranks


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank)
    for rank in range(1, BOARD_DIMENSIONS[1] + 1)
    for file in range(1, BOARD_DIMENSIONS[0] + 1)
)
