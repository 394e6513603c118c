"""
Move legality: the single source of truth for "may this side make this move right now?"

Builds on the movement rules of moves.py (the geometric layer) and adds turn ownership, capture ownership
and the ban on exposing your own king. Illegal moves are an everyday outcome: everything here returns a bool.
"""

from src.core.shared_types import Side
from src.xiangqi.board import Board
from src.xiangqi.moves import Move, follows_movement_rule, is_attacked
from src.xiangqi.square import ALL_SQUARES, Square


def is_legal(board: Board, side: Side, from_square: Square, to_square: Square) -> bool:
    """
    Checks, in order (stop at the first failure):
    ----

    1. Both squares on the board, and the piece actually moves
    2. A piece of `side` stands on the starting square
    3. You do not capture your own piece
    4. The movement rule of the piece allows it
    5. Your king is not attacked after the move (simulated on a scratch board)
    """
    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return False
    if from_square == to_square:
        return False

    moving_piece = board.piece(from_square)
    if moving_piece is None or moving_piece.side != side:
        return False

    target = board.piece(to_square)
    if target is not None and target.side == side:
        return False

    if not follows_movement_rule(board, from_square, to_square):
        return False

    return not is_in_check(board.after_move(from_square, to_square), side)


def is_in_check(board: Board, side: Side) -> bool:
    """Your king is attacked by any of the opponent's pieces. (No king on the board: nothing to attack.)"""
    king_square = board.find_king(side)
    if king_square is None:
        return False
    return is_attacked(king_square, side.opponent, board)


def legal_moves(board: Board, side: Side) -> list[Move]:
    """
    Exhaustive list of legal moves: every piece of the side, tried on every square of the board.

    Order is deterministic: origin in scan order, then destination in scan order.
    """
    return [
        Move(from_square, to_square)
        for from_square in board.locate_side(side)
        for to_square in ALL_SQUARES
        if is_legal(board, side, from_square, to_square)
    ]


def legal_targets(board: Board, side: Side, from_square: Square) -> list[Square]:
    """Where can the piece on this square go? (used to highlight squares)"""
    return [
        to_square
        for to_square in ALL_SQUARES
        if is_legal(board, side, from_square, to_square)
    ]


def has_legal_move(board: Board, side: Side) -> bool:
    """Same as bool(legal_moves(...)), but stops at the first legal move found"""
    return any(
        is_legal(board, side, from_square, to_square)
        for from_square in board.locate_side(side)
        for to_square in ALL_SQUARES
    )
