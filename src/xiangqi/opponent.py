"""
The computer opponent.

One ply, no lookahead: try every legal move, score the resulting board, and pick from the top of the ranking.
How far down the ranking it may pick is what the difficulty levels control.
"""

import logging
import random
from dataclasses import dataclass
from math import floor
from typing import Optional

from src.core.shared_types import Difficulty, PieceKind, Side
from src.xiangqi.board import Board
from src.xiangqi.moves import Move, has_crossed_river
from src.xiangqi.validator import legal_moves

logger = logging.getLogger(__name__)

CROSSED_PAWN_BONUS = 50

# fraction of the ranked moves the opponent chooses from (at least one move). Hard always plays the top move.
DIFFICULTY_SLICE: dict[Difficulty, float] = {
    Difficulty.EASY: 0.5,
    Difficulty.MEDIUM: 0.25,
}


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    score: int


def evaluate_board(board: Board, side: Side) -> int:
    """
    Material balance from the point of view of `side`
    ----
    * own pieces count positive, the opponent's negative
    * a pawn that crossed the river is worth an extra 50
    """
    score = 0
    for square, piece in board.position.items():
        value = piece.value
        if piece.kind == PieceKind.PAWN and has_crossed_river(square, piece.side):
            value += CROSSED_PAWN_BONUS
        score += value if piece.side == side else -value
    return score


def score_move(board: Board, side: Side, move: Move) -> int:
    """Evaluate the board after the move. A capture adds the captured piece's value once more on top."""
    captured = board.piece(move.to_square)
    score = evaluate_board(board.after_move(move.from_square, move.to_square), side)
    if captured is not None:
        score += captured.value
    return score


def rank_moves(board: Board, side: Side) -> list[ScoredMove]:
    """All legal moves, best first. Equal scores keep the order in which the moves were generated."""
    scored = [
        ScoredMove(move, score_move(board, side, move)) for move in legal_moves(board, side)
    ]
    return sorted(scored, key=lambda scored_move: scored_move.score, reverse=True)


def candidate_slice(ranked: list[ScoredMove], difficulty: Difficulty) -> list[ScoredMove]:
    """The top part of the ranking the opponent picks from at this difficulty"""
    if difficulty == Difficulty.HARD:
        return ranked[:1]
    size = max(1, floor(len(ranked) * DIFFICULTY_SLICE[difficulty]))
    return ranked[:size]


def choose_move(
    board: Board,
    side: Side,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """
    Pick the opponent's move. None when there is no legal move at all
    (the game is then already over by checkmate or stalemate).
    """
    ranked = rank_moves(board, side)
    if not ranked:
        return None

    candidates = candidate_slice(ranked, difficulty)
    chosen = (rng or random).choice(candidates)
    logger.debug(
        "Opponent (%s, %s) picked %s from %d of %d moves",
        side,
        difficulty,
        chosen.move.to_notation(),
        len(candidates),
        len(ranked),
    )
    return chosen.move
