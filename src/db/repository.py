"""Protocol repository (SQLAlchemy implementation in sql_repository.py, tests use an in-memory dictionary)"""

from typing import Protocol
from uuid import UUID

from src.core.models import SessionModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> SessionModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: SessionModel) -> tuple[SessionModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: SessionModel) -> SessionModel | None:
        """Add new info to existing record."""
        ...

    def delete_game(self, game_id: UUID) -> SessionModel | None:
        """Remove a game's record."""
        ...
