"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from typing import Optional

# Type aliases to make the models easier to read
BoardKey = str
SideName = str
# one entry of the game record, ex) {"move": "b7b0", "piece": "C", "captured": "n"}
RecordEntry = dict[str, Optional[str]]


@dataclass
class GameModel:
    """Transport-safe representation of the state of a single Xiangqi game. Enough to resume the game exactly."""

    board_key: BoardKey
    side_to_move: SideName
    record: list[RecordEntry]
    position_history: list[BoardKey]
    status: str
    winner: Optional[SideName] = None
    draw_reason: Optional[str] = None
    plies_since_progress: int = 0


@dataclass
class SessionModel:
    """A game + the way it is being played (mode, opponent settings)."""

    game: GameModel
    mode: str
    difficulty: str
    human_side: SideName
    # NOTE: pending opponent computations are never persisted; a restored session starts without one.
    generation: int = 0
