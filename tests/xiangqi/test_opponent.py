"""Unit tests for /src/xiangqi/opponent.py"""

import random
from typing import Callable
from unittest.mock import Mock

import pytest

from src.core.shared_types import Difficulty, Side
from src.xiangqi.board import Board
from src.xiangqi.moves import Move
from src.xiangqi.opponent import (
    CROSSED_PAWN_BONUS,
    ScoredMove,
    candidate_slice,
    choose_move,
    evaluate_board,
    rank_moves,
    score_move,
)
from src.xiangqi.validator import legal_moves

BoardFactory = Callable[[dict[str, str]], Board]


def ranking_of_size(size: int) -> list[ScoredMove]:
    return [ScoredMove(Move.from_notation("a9a8"), score) for score in range(size, 0, -1)]


# --- EVALUATION ---
def test_starting_position_is_balanced() -> None:
    board = Board.starting_position()
    assert evaluate_board(board, Side.RED) == 0
    assert evaluate_board(board, Side.BLACK) == 0


def test_evaluation_is_material_balance(board_with: BoardFactory) -> None:
    board = board_with({"e9": "K", "d0": "k", "a5": "R", "b2": "n"})
    assert evaluate_board(board, Side.RED) == 500 - 300
    assert evaluate_board(board, Side.BLACK) == 300 - 500


def test_crossed_pawn_bonus(board_with: BoardFactory) -> None:
    home = board_with({"e9": "K", "d0": "k", "e5": "P"})
    crossed = board_with({"e9": "K", "d0": "k", "e4": "P"})
    assert evaluate_board(home, Side.RED) == 100
    assert evaluate_board(crossed, Side.RED) == 100 + CROSSED_PAWN_BONUS
    assert evaluate_board(crossed, Side.BLACK) == -(100 + CROSSED_PAWN_BONUS)


def test_capture_counts_twice(board_with: BoardFactory) -> None:
    """Once through the material balance, once more as a capture bonus"""
    board = board_with({"e9": "K", "d0": "k", "a5": "R", "a2": "r"})
    assert score_move(board, Side.RED, Move.from_notation("a5a2")) == 1000
    assert score_move(board, Side.RED, Move.from_notation("a5a4")) == 0


# --- RANKING ---
def test_rank_moves_best_first() -> None:
    ranked = rank_moves(Board.starting_position(), Side.RED)
    assert len(ranked) == 44
    assert [scored.score for scored in ranked] == sorted(
        (scored.score for scored in ranked), reverse=True
    )
    # the two cannon captures of the knights, in the order they were generated
    assert ranked[0] == ScoredMove(Move.from_notation("b7b0"), 600)
    assert ranked[1] == ScoredMove(Move.from_notation("h7h0"), 600)


def test_rank_moves_keeps_generation_order_for_ties() -> None:
    board = Board.starting_position()
    ranked = rank_moves(board, Side.RED)
    quiet_moves = [scored.move for scored in ranked if scored.score == 0]
    generated = [move for move in legal_moves(board, Side.RED) if move in quiet_moves]
    assert quiet_moves == generated


# --- DIFFICULTY ---
@pytest.mark.parametrize(
    "size, difficulty, expected",
    [
        (44, Difficulty.EASY, 22),
        (44, Difficulty.MEDIUM, 11),
        (44, Difficulty.HARD, 1),
        (3, Difficulty.EASY, 1),
        (3, Difficulty.MEDIUM, 1),
        (1, Difficulty.EASY, 1),
        (1, Difficulty.MEDIUM, 1),
        (1, Difficulty.HARD, 1),
        (9, Difficulty.EASY, 4),
        (9, Difficulty.MEDIUM, 2),
    ],
)
def test_candidate_slice_size(size: int, difficulty: Difficulty, expected: int) -> None:
    ranked = ranking_of_size(size)
    candidates = candidate_slice(ranked, difficulty)
    assert len(candidates) == expected
    assert candidates == ranked[:expected]


def test_candidate_slice_of_nothing() -> None:
    assert candidate_slice([], Difficulty.EASY) == []
    assert candidate_slice([], Difficulty.HARD) == []


# --- CHOOSING ---
def test_hard_takes_the_best_capture(board_with: BoardFactory) -> None:
    board = board_with({"e9": "K", "d0": "k", "a5": "R", "a2": "r"})
    assert choose_move(board, Side.RED, Difficulty.HARD) == Move.from_notation("a5a2")


def test_hard_is_deterministic() -> None:
    board = Board.starting_position()
    moves = {choose_move(board, Side.RED, Difficulty.HARD, random.Random(seed)) for seed in range(5)}
    assert moves == {Move.from_notation("b7b0")}


@pytest.mark.parametrize("difficulty, slice_size", [(Difficulty.EASY, 22), (Difficulty.MEDIUM, 11)])
def test_choice_is_made_within_slice(difficulty: Difficulty, slice_size: int) -> None:
    """Let the mocked random source pick the last candidate it is offered"""
    board = Board.starting_position()
    rng = Mock()
    rng.choice.side_effect = lambda candidates: candidates[-1]

    move = choose_move(board, Side.RED, difficulty, rng)

    offered = rng.choice.call_args.args[0]
    assert len(offered) == slice_size
    assert move == offered[-1].move
    assert move == rank_moves(board, Side.RED)[slice_size - 1].move


def test_chosen_move_is_legal() -> None:
    board = Board.starting_position()
    rng = random.Random(42)
    for difficulty in Difficulty:
        move = choose_move(board, Side.BLACK, difficulty, rng)
        assert move in legal_moves(board, Side.BLACK)


def test_no_move_when_stalemated(board_with: BoardFactory) -> None:
    board = board_with({"d9": "K", "e2": "P", "f5": "R", "e0": "k"})
    assert choose_move(board, Side.BLACK, Difficulty.EASY) is None
