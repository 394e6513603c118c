"""Defines the Xiangqi pieces"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import PieceKind, Side

KEY_TO_PIECE: dict[str, PieceKind] = {
    "r": PieceKind.ROOK,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.ELEPHANT,
    "a": PieceKind.ADVISOR,
    "k": PieceKind.KING,
    "c": PieceKind.CANNON,
    "p": PieceKind.PAWN,
}

PIECE_TO_KEY: dict[PieceKind, str] = {value: key for key, value in KEY_TO_PIECE.items()}


PIECE_VALUES: dict[PieceKind, int] = {
    PieceKind.KING: 10000,
    PieceKind.ROOK: 500,
    PieceKind.KNIGHT: 300,
    PieceKind.CANNON: 300,
    PieceKind.ELEPHANT: 200,
    PieceKind.ADVISOR: 200,
    PieceKind.PAWN: 100,
}


@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    side: Side

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.kind]

    @classmethod
    def from_key(cls, character: str) -> Self:
        # upper case: Red pieces, lower case: Black pieces
        side = Side.RED if character.isupper() else Side.BLACK
        kind = KEY_TO_PIECE[character.lower()]
        return cls(kind, side)

    def to_key(self) -> str:
        character = PIECE_TO_KEY[self.kind]
        return character.upper() if self.side == Side.RED else character
