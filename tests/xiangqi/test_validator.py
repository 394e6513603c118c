"""Unit tests for /src/xiangqi/validator.py"""

from typing import Callable

import pytest

from src.core.shared_types import Side
from src.xiangqi.board import Board
from src.xiangqi.moves import Move
from src.xiangqi.square import Square
from src.xiangqi.validator import (
    has_legal_move,
    is_in_check,
    is_legal,
    legal_moves,
    legal_targets,
)

BoardFactory = Callable[[dict[str, str]], Board]


def sq(notation: str) -> Square:
    return Square.from_notation(notation)


# --- IS LEGAL ---
@pytest.mark.parametrize("notation", ["h7e7", "b9c7", "e6e5", "a9a7", "d9e8"])
def test_is_legal_accepts_opening_move(notation: str) -> None:
    board = Board.starting_position()
    move = Move.from_notation(notation)
    assert is_legal(board, Side.RED, move.from_square, move.to_square)


def test_is_legal_out_of_bounds() -> None:
    board = Board.starting_position()
    assert not is_legal(board, Side.RED, sq("a9"), Square(0, 10))
    assert not is_legal(board, Side.RED, Square(-1, 9), sq("a8"))


def test_is_legal_null_move() -> None:
    board = Board.starting_position()
    assert not is_legal(board, Side.RED, sq("a9"), sq("a9"))


def test_is_legal_requires_own_piece() -> None:
    board = Board.starting_position()
    # empty square
    assert not is_legal(board, Side.RED, sq("e5"), sq("e4"))
    # opponent's piece
    assert not is_legal(board, Side.RED, sq("a3"), sq("a4"))
    assert is_legal(board, Side.BLACK, sq("a3"), sq("a4"))


def test_is_legal_no_capturing_own_piece() -> None:
    board = Board.starting_position()
    # rook a9 onto its own pawn on a6 (path a8, a7 is empty)
    assert not is_legal(board, Side.RED, sq("a9"), sq("a6"))


def test_is_legal_requires_movement_rule() -> None:
    board = Board.starting_position()
    assert not is_legal(board, Side.RED, sq("b9"), sq("b8"))  # knight moving like a rook
    assert not is_legal(board, Side.RED, sq("e6"), sq("e4"))  # pawn moving two


def test_pinned_rook_may_not_leave_file(board_with: BoardFactory) -> None:
    """The rook on e5 shields its king from the Black rook on e1"""
    board = board_with({"e9": "K", "d0": "k", "e1": "r", "e5": "R"})
    assert not is_legal(board, Side.RED, sq("e5"), sq("a5"))
    assert is_legal(board, Side.RED, sq("e5"), sq("e3"))
    assert is_legal(board, Side.RED, sq("e5"), sq("e1"))


def test_last_blocker_between_kings_may_not_leave(board_with: BoardFactory) -> None:
    board = board_with({"e9": "K", "e0": "k", "e5": "R"})
    assert not is_legal(board, Side.RED, sq("e5"), sq("a5"))
    assert is_legal(board, Side.RED, sq("e5"), sq("e1"))


def test_king_may_not_walk_into_attack(board_with: BoardFactory) -> None:
    board = board_with({"e9": "K", "f0": "k", "d0": "r"})
    assert not is_legal(board, Side.RED, sq("e9"), sq("d9"))
    assert is_legal(board, Side.RED, sq("e9"), sq("e8"))


def test_move_must_resolve_check(board_with: BoardFactory) -> None:
    """Red is in check by the rook on e1: moving the far away pawn does not help"""
    board = board_with({"e9": "K", "d0": "k", "e1": "r", "a6": "P"})
    assert is_in_check(board, Side.RED)
    assert not is_legal(board, Side.RED, sq("a6"), sq("a5"))
    assert is_legal(board, Side.RED, sq("e9"), sq("f9"))


# --- IS IN CHECK ---
def test_no_check_at_start() -> None:
    board = Board.starting_position()
    assert not is_in_check(board, Side.RED)
    assert not is_in_check(board, Side.BLACK)


def test_check_without_king_is_false(board_with: BoardFactory) -> None:
    board = board_with({"e0": "k", "e5": "R"})
    assert not is_in_check(board, Side.RED)
    assert is_in_check(board, Side.BLACK)


def test_check_by_facing_king(board_with: BoardFactory) -> None:
    board = board_with({"e9": "K", "e0": "k"})
    assert is_in_check(board, Side.RED)
    assert is_in_check(board, Side.BLACK)


# --- ENUMERATION ---
def test_number_of_opening_moves() -> None:
    """
    Rooks 4, knights 4, elephants 4, advisors 2, king 1, cannons 24 and pawns 5
    """
    board = Board.starting_position()
    assert len(legal_moves(board, Side.RED)) == 44
    assert len(legal_moves(board, Side.BLACK)) == 44


def test_legal_moves_order_is_deterministic() -> None:
    board = Board.starting_position()
    moves = legal_moves(board, Side.RED)
    assert moves == legal_moves(board, Side.RED)
    # Red's pieces are scanned starting at rank 6 (the pawns), a6 comes first
    assert moves[0] == Move.from_notation("a6a5")


def test_legal_targets_of_cannon() -> None:
    board = Board.starting_position()
    targets = legal_targets(board, Side.RED, sq("b7"))
    assert len(targets) == 12
    assert sq("b0") in targets
    assert sq("b2") not in targets


def test_legal_targets_of_empty_square() -> None:
    board = Board.starting_position()
    assert legal_targets(board, Side.RED, sq("e5")) == []


def test_has_legal_move(board_with: BoardFactory) -> None:
    assert has_legal_move(Board.starting_position(), Side.RED)

    # Black king on e0: f0 covered by the rook, e1 by the pawn, d0 would face the Red king
    stalemated = board_with({"d9": "K", "e2": "P", "f5": "R", "e0": "k"})
    assert not is_in_check(stalemated, Side.BLACK)
    assert not has_legal_move(stalemated, Side.BLACK)
    assert legal_moves(stalemated, Side.BLACK) == []
