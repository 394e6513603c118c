"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError, InvalidSquareError
from src.core.shared_types import (
    Difficulty,
    DrawReason,
    GameMode,
    MoveResult,
    Side,
    Status,
)
from src.xiangqi.square import BOARD_DIMENSIONS, Square


def _validate_square_notation(value: str) -> str:
    try:
        Square.from_notation(value)
    except InvalidSquareError as error:
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        ) from error
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    mode: Optional[GameMode] = None
    difficulty: Optional[Difficulty] = None
    human_side: Optional[Side] = None
    starting_key: Optional[str] = None

    @field_validator("starting_key")
    @classmethod
    def validate_starting_key(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        ranks = value.strip().split("/")
        if len(ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidRequestError(
                f"Board key must contain {BOARD_DIMENSIONS[1]} ranks separated by '/'."
            )
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    from_square: Optional[str] = None

    @field_validator("from_square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_square_notation(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_notation(value)


class ResignRequest(BaseModel):
    game_id: UUID
    side: Side


class DrawRequest(BaseModel):
    game_id: UUID


class ResetRequest(BaseModel):
    game_id: UUID


class OpponentMoveRequest(BaseModel):
    game_id: UUID


class UpdateSettingsRequest(BaseModel):
    game_id: UUID
    mode: Optional[GameMode] = None
    difficulty: Optional[Difficulty] = None
    human_side: Optional[Side] = None


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    board_key: str
    side_to_move: Side
    status: Status
    winner: Optional[Side]
    draw_reason: Optional[DrawReason]
    in_check: bool
    plies_since_progress: int
    move_history: list[str]
    mode: GameMode
    difficulty: Difficulty
    human_side: Side


class MoveResponse(BaseModel):
    result: MoveResult
    game: GameResponse


class LegalMovesResponse(BaseModel):
    game_id: UUID
    side: Side
    legal_moves: list[str]
