"""The board holds the piece placement and answers questions about it (who stands where, what is attacked)."""

from dataclasses import dataclass
from typing import Self

from chainchess.chess.moves import ATTACK_RULES, MOVEMENT_RULES, Move
from chainchess.chess.pieces import EMPTY, Color, Piece, PieceType, opponent
from chainchess.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square


@dataclass
class Board:
    position: dict[Square, Piece]

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with the rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        position: dict[Square, Piece] = {}
        for rank_idx, fen_one_rank in enumerate(fen_str.split("/")):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.isalpha():
                    position[Square(file, rank)] = Piece.from_fen(character)
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    for _ in range(int(character)):
                        position[Square(file, rank)] = EMPTY
                        file += 1
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if piece.type != PieceType.EMPTY:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> "Board":
        # Pieces are immutable, so a shallow copy of the mapping is enough
        return Board(dict(self.position))

    def piece(self, square: Square) -> Piece:
        return self.position.get(square, EMPTY)

    def is_empty(self, square: Square) -> bool:
        return self.piece(square).type == PieceType.EMPTY

    def locate_pieces(self, piece: Piece) -> list[Square]:
        return [square for square in ALL_SQUARES if self.piece(square) == piece]

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square in ALL_SQUARES if self.piece(square).color == color]

    def king_square(self, color: Color) -> Square | None:
        kings = self.locate_pieces(Piece(PieceType.KING, color))
        return kings[0] if kings else None

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(not self.is_empty(square) for square in squares)

    def is_under_attack(self, square: Square, by_color: Color) -> bool:
        return any(rule(square, by_color, self) for rule in ATTACK_RULES)

    def is_any_under_attack(self, squares: list[Square], by_color: Color) -> bool:
        return any(self.is_under_attack(square, by_color) for square in squares)

    def is_check(self, color: Color) -> bool:
        """Is the king of the given color attacked? (A board without that king is never in check.)"""
        king = self.king_square(color)
        if king is None:
            return False
        return self.is_under_attack(king, opponent(color))

    def generate_candidate_moves(self, color: Color) -> list[Move]:
        """
        Before knowing the set of legal moves, we use raycasting to find candidate moves, which will later be tested for legality
        (making sure it does not put yourself in check.)
        """
        candidate_moves: list[Move] = []
        for starting_square in self.locate_color(color):
            movement_rule = MOVEMENT_RULES[self.piece(starting_square).type]
            candidate_moves.extend(movement_rule(starting_square, self))
        return candidate_moves

    # --- UPDATES (only ever performed on a copy by the engine) ---
    def move_piece(self, move: Move) -> None:
        piece_that_moved = self.piece(move.from_square)
        self.position[move.from_square] = EMPTY
        self.position[move.to_square] = piece_that_moved

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> None:
        self.position[square] = EMPTY
