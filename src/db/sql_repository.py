"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel, SessionModel
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> SessionModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: SessionModel) -> tuple[SessionModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Created game %s", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: SessionModel) -> SessionModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Updated game %s", game_id)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> SessionModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        logger.debug("Deleted game %s", game_id)
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game_db: DBGame, model: SessionModel) -> None:
        """Write the data of the transfer model onto the SQLAlchemy model."""
        game = model.game
        game_db.board_key = game.board_key
        game_db.side_to_move = game.side_to_move
        # new lists: JSON columns only notice re-assignment, not in-place mutation
        game_db.record = [dict(entry) for entry in game.record]
        game_db.position_history = list(game.position_history)
        game_db.status = game.status
        game_db.winner = game.winner
        game_db.draw_reason = game.draw_reason
        game_db.plies_since_progress = game.plies_since_progress
        game_db.mode = model.mode
        game_db.difficulty = model.difficulty
        game_db.human_side = model.human_side
        game_db.generation = model.generation

    def _to_model(self, game_db: DBGame) -> SessionModel:
        """Convert SQLAlchemy model to data transfer model."""
        return SessionModel(
            game=GameModel(
                board_key=game_db.board_key,
                side_to_move=game_db.side_to_move,
                record=[dict(entry) for entry in game_db.record],
                position_history=list(game_db.position_history),
                status=game_db.status,
                winner=game_db.winner,
                draw_reason=game_db.draw_reason,
                plies_since_progress=game_db.plies_since_progress,
            ),
            mode=game_db.mode,
            difficulty=game_db.difficulty,
            human_side=game_db.human_side,
            generation=game_db.generation,
        )
