"""The Board only knows where the pieces are. Rules that act on the position live in moves.py / validator.py"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import InvalidBoardKeyError
from src.core.shared_types import PieceKind, Side
from src.xiangqi.pieces import KEY_TO_PIECE, Piece
from src.xiangqi.square import ALL_SQUARES, BOARD_DIMENSIONS, Square

STARTING_KEY = "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR"
EMPTY_KEY = "/".join(["9"] * BOARD_DIMENSIONS[1])


@dataclass
class Board:
    # only occupied squares are stored. Missing square == empty square.
    position: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_key(STARTING_KEY)

    @classmethod
    def from_key(cls, key: str) -> Self:
        """Construct a board from its canonical key.

        The key is the placement part of a Xiangqi FEN string, ex. the standard starting position:
        rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR
        means:
        * ranks are separated by slashes and read from rank 0 (Black's back rank) to rank 9 (Red's back rank)
        * within a rank we read from file 0 (a) to file 8 (i)
        * a letter is a piece: upper case for Red, lower case for Black
        * a digit denotes that many empty squares in a row
        """
        ranks = key.split("/")
        if len(ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidBoardKeyError(
                f"Board key needs {BOARD_DIMENSIONS[1]} ranks, got {len(ranks)}: {key!r}"
            )

        position: dict[Square, Piece] = {}
        for rank, key_one_rank in enumerate(ranks):
            file = 0
            for character in key_one_rank:
                if character.isdigit():
                    file += int(character)
                elif character.lower() in KEY_TO_PIECE:
                    if file < BOARD_DIMENSIONS[0]:
                        position[Square(file, rank)] = Piece.from_key(character)
                    file += 1
                else:
                    raise InvalidBoardKeyError(
                        f"Unknown character {character!r} in board key {key!r}"
                    )
            if file != BOARD_DIMENSIONS[0]:
                raise InvalidBoardKeyError(
                    f"Rank {rank} of board key {key!r} covers {file} files instead of {BOARD_DIMENSIONS[0]}"
                )
        return cls(position)

    def to_key(self) -> str:
        """Canonical key. Two boards with the same pieces on the same squares always share a key."""
        return "/".join(self._rank_to_key(rank) for rank in range(BOARD_DIMENSIONS[1]))

    def _rank_to_key(self, rank: int) -> str:
        characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece(Square(file, rank))
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                characters.append(str(empty_count))
                empty_count = 0
            characters.append(piece.to_key())

        if empty_count > 0:
            characters.append(str(empty_count))
        return "".join(characters)

    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_occupied(self, square: Square) -> bool:
        return square in self.position

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        return self.position.pop(square, None)

    def move_piece(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """Update the position on the board. Returns the captured piece (if any)."""
        moving_piece = self.position.pop(from_square)
        captured = self.position.get(to_square)
        self.position[to_square] = moving_piece
        return captured

    def copy(self) -> Self:
        # Squares and Pieces are frozen, copying the mapping is enough
        return type(self)(dict(self.position))

    def after_move(self, from_square: Square, to_square: Square) -> Self:
        """Scratch copy of the board with the move made. The board itself is left alone."""
        board = self.copy()
        board.move_piece(from_square, to_square)
        return board

    def locate_side(self, side: Side) -> list[Square]:
        """Squares holding pieces of the side, in scan order (rank by rank, file by file)"""
        return [
            square
            for square in ALL_SQUARES
            if (piece := self.piece(square)) is not None and piece.side == side
        ]

    def find_king(self, side: Side) -> Optional[Square]:
        king = Piece(PieceKind.KING, side)
        return next(
            (square for square, piece in self.position.items() if piece == king), None
        )

    def piece_count(self) -> int:
        return len(self.position)

    def only_kings_left(self) -> bool:
        pieces = list(self.position.values())
        return len(pieces) == 2 and all(piece.kind == PieceKind.KING for piece in pieces) and (
            pieces[0].side != pieces[1].side
        )
