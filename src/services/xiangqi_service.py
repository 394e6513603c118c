"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Callable
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    DrawRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    OpponentMoveRequest,
    ResetRequest,
    ResignRequest,
    UpdateSettingsRequest,
)
from src.core.exceptions import RepositoryError
from src.core.models import SessionModel
from src.core.shared_types import MoveResult
from src.db.repository import GameRepository
from src.services.session import GameSession
from src.xiangqi.game import Game
from src.xiangqi.moves import Move
from src.xiangqi.square import Square

logger = logging.getLogger(__name__)


class XiangqiService:
    """Orchestration of layers for Xiangqi games."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game (standard starting position unless a board key is supplied)."""

        # Use info in CreateGameRequest to create a new session, and convert into SessionModel
        session = GameSession(
            game=Game.new_game(request.starting_key),
            mode=request.mode,
            difficulty=request.difficulty,
            human_side=request.human_side,
        )

        # Store the SessionModel in the repository
        stored_session, game_id = self.repo.create_game(session.to_model())
        logger.info("New %s game %s", session.mode, game_id)

        return self._create_game_response(game_id, GameSession.from_model(stored_session))

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        session = self._load_session(request.game_id)
        return self._create_game_response(request.game_id, session)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Retrieve the legal moves of the side to move (only those of one piece, if a square is given)."""
        session = self._load_session(request.game_id)
        game = session.game

        if game.is_over:
            moves: list[str] = []
        elif request.from_square is not None:
            from_square = Square.from_notation(request.from_square)
            moves = [
                Move(from_square, to_square).to_notation()
                for to_square in session.legal_targets(from_square)
            ]
        else:
            moves = [move.to_notation() for move in game.legal_moves()]

        return LegalMovesResponse(
            game_id=request.game_id, side=game.side_to_move, legal_moves=moves
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. An illegal move is reported in the response, not raised."""
        return self._run(
            request.game_id,
            lambda session: session.request_move(
                Square.from_notation(request.from_square),
                Square.from_notation(request.to_square),
            ),
        )

    def resign(self, request: ResignRequest) -> MoveResponse:
        return self._run(request.game_id, lambda session: session.request_resign(request.side))

    def propose_draw(self, request: DrawRequest) -> MoveResponse:
        return self._run(request.game_id, lambda session: session.request_draw())

    def reset_game(self, request: ResetRequest) -> GameResponse:
        return self._update(request.game_id, lambda session: session.request_reset())

    def update_settings(self, request: UpdateSettingsRequest) -> GameResponse:
        """Mode / difficulty / human side. NOTE: changing the mode resets the game."""

        def apply_settings(session: GameSession) -> None:
            if request.difficulty is not None:
                session.set_opponent_difficulty(request.difficulty)
            if request.human_side is not None:
                session.set_human_side(request.human_side)
            if request.mode is not None and request.mode != session.mode:
                session.set_mode(request.mode)

        return self._update(request.game_id, apply_settings)

    def opponent_move(self, request: OpponentMoveRequest) -> MoveResponse:
        """
        Let the computer opponent move.
        ----
        Computed and applied within the request. (Any 'thinking time' is up to the frontend.)
        """
        return self._run(request.game_id, _play_opponent)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with {request.game_id=} not found.")

    # -- Internal helpers --
    def _run(self, game_id: UUID, action: Callable[[GameSession], MoveResult]) -> MoveResponse:
        """Load the session, perform the action, store the result (only when something changed)."""
        session = self._load_session(game_id)
        result = action(session)
        if result == MoveResult.OK:
            self._store_session(game_id, session)
        else:
            logger.debug("Request on game %s refused: %s", game_id, result)
        return MoveResponse(result=result, game=self._create_game_response(game_id, session))

    def _update(self, game_id: UUID, action: Callable[[GameSession], None]) -> GameResponse:
        session = self._load_session(game_id)
        action(session)
        self._store_session(game_id, session)
        return self._create_game_response(game_id, session)

    def _create_game_response(self, game_id: UUID, session: GameSession) -> GameResponse:
        """Convert info in the session into a GameResponse (for game with given ID.)"""
        game = session.game
        return GameResponse(
            game_id=game_id,
            board_key=session.board_key,
            side_to_move=session.side_to_move,
            status=session.status,
            winner=session.winner,
            draw_reason=session.draw_reason,
            in_check=game.is_in_check(session.side_to_move),
            plies_since_progress=session.plies_since_progress,
            move_history=[recorded.move.to_notation() for recorded in session.record],
            mode=session.mode,
            difficulty=session.difficulty,
            human_side=session.human_side,
        )

    def _load_session(self, game_id: UUID) -> GameSession:
        return GameSession.from_model(self._fetch_game(game_id))

    def _store_session(self, game_id: UUID, session: GameSession) -> None:
        if self.repo.update_game(game_id, session.to_model()) is None:
            raise RepositoryError(f"Game with {game_id=} could not be updated.")

    def _fetch_game(self, game_id: UUID) -> SessionModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        session_model = self.repo.get_game(game_id)
        if session_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return session_model


def _play_opponent(session: GameSession) -> MoveResult:
    if session.game.is_over:
        return MoveResult.GAME_ALREADY_OVER
    return MoveResult.OK if session.play_opponent_move() else MoveResult.NOT_YOUR_TURN
