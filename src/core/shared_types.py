"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    PLAYING = "playing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"
    RESIGNED = "resigned"


class DrawReason(StrEnum):
    REPETITION = "repetition"
    MOVE_COUNT = "move count"
    INSUFFICIENT_MATERIAL = "insufficient material"
    AGREEMENT = "agreement"


class Side(StrEnum):
    RED = "red"
    BLACK = "black"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self == Side.RED else Side.RED


class PieceKind(StrEnum):
    ROOK = "rook"
    KNIGHT = "knight"
    ELEPHANT = "elephant"
    ADVISOR = "advisor"
    KING = "king"
    CANNON = "cannon"
    PAWN = "pawn"


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GameMode(StrEnum):
    LOCAL = "local"
    VS_OPPONENT = "vs-opponent"
    # NOTE: no transport behind this one. Plays exactly like LOCAL.
    NETWORKED = "networked"


class MoveResult(StrEnum):
    """Outcome of any request that may change the game. None of these are exceptional."""

    OK = "ok"
    ILLEGAL_MOVE = "illegal move"
    OUT_OF_BOUNDS = "out of bounds"
    GAME_ALREADY_OVER = "game already over"
    NOT_YOUR_TURN = "not your turn"
