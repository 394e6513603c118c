"""
Custom exceptions.

Illegal moves are NOT exceptions (see MoveResult in shared_types.py).
These are only raised when data coming from outside the engine is malformed.
"""


class GameError(Exception):
    """Top-level exception for anything raised by this application."""


class InvalidBoardKeyError(GameError):
    """Board key (FEN placement string) cannot be parsed."""


class InvalidSquareError(GameError):
    """Square notation cannot be parsed."""


class GameStateError(GameError):
    """Stored game data is inconsistent (unknown status, side, ...)."""


class InvalidRequestError(GameError):
    """Request models failing validation."""


class RepositoryError(GameError):
    """Record not found / could not be stored."""


class ConfigurationError(GameError):
    """Settings could not be loaded."""
