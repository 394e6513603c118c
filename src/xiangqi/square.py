"""
A square (intersection, strictly speaking) on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

from src.core.exceptions import InvalidSquareError

# (files, ranks). Rank 0 is Black's back rank, rank 9 is Red's back rank.
BOARD_DIMENSIONS = (9, 10)
FILE_LETTERS = ascii_lowercase[: BOARD_DIMENSIONS[0]]


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_notation(cls, sq: str) -> Square:
        """'a0' - 'i9' get converted to (0,0) - (8,9). So 'e9' is where the Red king starts."""
        if len(sq) != 2 or sq[0] not in FILE_LETTERS or not sq[1].isdigit():
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square.")
        return cls(FILE_LETTERS.index(sq[0]), int(sq[1]))

    def to_notation(self) -> str:
        return f"{FILE_LETTERS[self.file]}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank)
    for rank in range(BOARD_DIMENSIONS[1])
    for file in range(BOARD_DIMENSIONS[0])
)
