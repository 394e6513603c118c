"""Unit tests for /src/xiangqi/pieces.py"""

import pytest

from src.core.shared_types import PieceKind, Side
from src.xiangqi.pieces import KEY_TO_PIECE, PIECE_TO_KEY, PIECE_VALUES, Piece


@pytest.mark.parametrize("character", list("RNBAKCP"))
def test_upper_case_is_red(character: str) -> None:
    piece = Piece.from_key(character)
    assert piece.side == Side.RED
    assert piece.kind == KEY_TO_PIECE[character.lower()]
    assert piece.to_key() == character


@pytest.mark.parametrize("character", list("rnbakcp"))
def test_lower_case_is_black(character: str) -> None:
    piece = Piece.from_key(character)
    assert piece.side == Side.BLACK
    assert piece.to_key() == character


def test_key_mappings_are_inverse() -> None:
    assert len(PIECE_TO_KEY) == len(PieceKind)
    for kind, character in PIECE_TO_KEY.items():
        assert KEY_TO_PIECE[character] == kind


@pytest.mark.parametrize(
    "kind, value",
    [
        (PieceKind.KING, 10000),
        (PieceKind.ROOK, 500),
        (PieceKind.KNIGHT, 300),
        (PieceKind.CANNON, 300),
        (PieceKind.ELEPHANT, 200),
        (PieceKind.ADVISOR, 200),
        (PieceKind.PAWN, 100),
    ],
)
def test_piece_values(kind: PieceKind, value: int) -> None:
    """Same value for both sides"""
    assert PIECE_VALUES[kind] == value
    assert Piece(kind, Side.RED).value == Piece(kind, Side.BLACK).value == value


def test_unknown_character() -> None:
    with pytest.raises(KeyError):
        _ = Piece.from_key("q")
