"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of Xiangqi -->
it owns the board, the record of moves, the position history and the counters, and derives the game status.

Only apply_move / resign / propose_draw / reset mutate anything.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Self, TypeVar

from src.core.exceptions import GameStateError, InvalidBoardKeyError, InvalidSquareError
from src.core.models import GameModel, RecordEntry
from src.core.shared_types import DrawReason, MoveResult, Side, Status
from src.xiangqi.board import Board
from src.xiangqi.moves import Move, RecordedMove
from src.xiangqi.pieces import Piece
from src.xiangqi.square import Square
from src.xiangqi.validator import (
    has_legal_move,
    is_in_check,
    is_legal,
    legal_moves,
    legal_targets,
)

logger = logging.getLogger(__name__)

# Same board occurring this many times in the position history is a draw
REPETITION_LIMIT = 3
# 50 moves per side without a capture or a pawn move is a draw
PROGRESS_PLY_LIMIT = 100

E = TypeVar("E", bound=StrEnum)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    record: list[RecordedMove]
    history: list[str]  # list of board keys, starting with the initial position
    side_to_move: Side
    plies_since_progress: int
    status: Status
    winner: Optional[Side] = None
    draw_reason: Optional[DrawReason] = None

    @classmethod
    def new_game(cls, starting_key: Optional[str] = None) -> Self:
        """Standard starting position (or the one encoded by the key), Red to move.

        A custom position may already be over (checkmate, stalemate, kings only). Black must not be in check:
        that would mean the capture of a king on Red's first move.
        """
        board = Board.from_key(starting_key) if starting_key else Board.starting_position()
        game = cls(
            board=board,
            record=[],
            history=[board.to_key()],
            side_to_move=Side.RED,
            plies_since_progress=0,
            status=Status.PLAYING,
        )
        if starting_key:
            if game.is_in_check(game.side_to_move.opponent):
                raise InvalidBoardKeyError(f"Side not to move is in check: {starting_key!r}")
            game._update_game_status()
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        status = _parse_enum(Status, model.status, "status")
        side_to_move = _parse_enum(Side, model.side_to_move, "side to move")
        winner = _parse_enum(Side, model.winner, "winner") if model.winner else None
        draw_reason = (
            _parse_enum(DrawReason, model.draw_reason, "draw reason")
            if model.draw_reason
            else None
        )
        board = Board.from_key(model.board_key)
        record = [_entry_to_recorded_move(entry) for entry in model.record]
        history = list(model.position_history) or [board.to_key()]

        return cls(
            board=board,
            record=record,
            history=history,
            side_to_move=side_to_move,
            plies_since_progress=model.plies_since_progress,
            status=status,
            winner=winner,
            draw_reason=draw_reason,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            board_key=self.board.to_key(),
            side_to_move=self.side_to_move.value,
            record=[_recorded_move_to_entry(recorded) for recorded in self.record],
            position_history=list(self.history),
            status=self.status.value,
            winner=self.winner.value if self.winner else None,
            draw_reason=self.draw_reason.value if self.draw_reason else None,
            plies_since_progress=self.plies_since_progress,
        )

    @property
    def is_over(self) -> bool:
        return self.status != Status.PLAYING

    # --- MUTATIONS ---
    def apply_move(self, from_square: Square, to_square: Square) -> MoveResult:
        """
        Attempt to make a move for the side to move
        -----

        1. make sure the game is (still) in progress and the squares exist
        2. make sure the move is legal (nothing changes if it is not)
        3. update the board and the record of moves
        4. update the position history and the progress counter
        5. hand the turn to the opponent
        6. update game status (if needed)
        """
        if self.is_over:
            return MoveResult.GAME_ALREADY_OVER

        if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
            return MoveResult.OUT_OF_BOUNDS

        if not is_legal(self.board, self.side_to_move, from_square, to_square):
            logger.debug(
                "Rejected %s for %s",
                Move(from_square, to_square).to_notation(),
                self.side_to_move,
            )
            return MoveResult.ILLEGAL_MOVE

        # Store move info before update
        recorded = RecordedMove(
            move=Move(from_square, to_square),
            moved_piece=self.board.piece(from_square),  # type: ignore[arg-type]  # is_legal guarantees a piece
            captured_piece=self.board.piece(to_square),
        )

        self.board.move_piece(from_square, to_square)
        self.record.append(recorded)
        self.history.append(self.board.to_key())
        self._update_progress_counter(recorded)
        self.side_to_move = self.side_to_move.opponent
        logger.debug("Played %s (%s)", recorded.move.to_notation(), recorded.moved_piece.to_key())

        self._update_game_status()
        return MoveResult.OK

    def resign(self, side: Side) -> MoveResult:
        if self.is_over:
            return MoveResult.GAME_ALREADY_OVER
        self._finish(Status.RESIGNED, winner=side.opponent)
        return MoveResult.OK

    def propose_draw(self) -> MoveResult:
        """No negotiation: a proposed draw is an accepted draw."""
        if self.is_over:
            return MoveResult.GAME_ALREADY_OVER
        self._finish(Status.DRAW, draw_reason=DrawReason.AGREEMENT)
        return MoveResult.OK

    def reset(self) -> None:
        """Back to the standard starting position. Everything else is cleared as well."""
        fresh = Game.new_game()
        self.board = fresh.board
        self.record = fresh.record
        self.history = fresh.history
        self.side_to_move = fresh.side_to_move
        self.plies_since_progress = fresh.plies_since_progress
        self.status = fresh.status
        self.winner = None
        self.draw_reason = None

    # --- READ-ONLY QUERIES ---
    def piece_at(self, square: Square) -> Optional[Piece]:
        if not square.is_within_bounds():
            return None
        return self.board.piece(square)

    def is_legal(self, from_square: Square, to_square: Square) -> bool:
        """Legality for the side to move (ignores whether the game is already over)"""
        return is_legal(self.board, self.side_to_move, from_square, to_square)

    def is_in_check(self, side: Side) -> bool:
        return is_in_check(self.board, side)

    def legal_moves(self, side: Optional[Side] = None) -> list[Move]:
        return legal_moves(self.board, side or self.side_to_move)

    def legal_targets(self, from_square: Square) -> list[Square]:
        return legal_targets(self.board, self.side_to_move, from_square)

    def is_checkmate(self, side: Side) -> bool:
        return self.is_in_check(side) and not has_legal_move(self.board, side)

    def is_stalemate(self, side: Side) -> bool:
        return not self.is_in_check(side) and not has_legal_move(self.board, side)

    # -- PRIVATE HELPERS ---
    def _update_progress_counter(self, recorded: RecordedMove) -> None:
        if recorded.is_capture or recorded.is_pawn_move:
            self.plies_since_progress = 0
        else:
            self.plies_since_progress += 1

    def _update_game_status(self) -> None:
        """Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already been handed over. The side to move is the opponent of the side that just moved.
        """
        side = self.side_to_move
        in_check = self.is_in_check(side)
        can_move = has_legal_move(self.board, side)

        if in_check and not can_move:
            self._finish(Status.CHECKMATE, winner=side.opponent)
        elif not can_move:
            self._finish(Status.STALEMATE)
        elif self._is_repetition():
            self._finish(Status.DRAW, draw_reason=DrawReason.REPETITION)
        elif self._is_move_count_draw():
            self._finish(Status.DRAW, draw_reason=DrawReason.MOVE_COUNT)
        elif self.board.only_kings_left():
            self._finish(Status.DRAW, draw_reason=DrawReason.INSUFFICIENT_MATERIAL)

    def _finish(
        self,
        status: Status,
        winner: Optional[Side] = None,
        draw_reason: Optional[DrawReason] = None,
    ) -> None:
        self.status = status
        self.winner = winner
        self.draw_reason = draw_reason
        logger.info(
            "Game over: %s (winner: %s%s)",
            status,
            winner or "none",
            f", {draw_reason}" if draw_reason else "",
        )

    def _is_repetition(self) -> bool:
        """The current board occurs (at least) 3 times in the history (the current one included)"""
        return self.history.count(self.board.to_key()) >= REPETITION_LIMIT

    def _is_move_count_draw(self) -> bool:
        return self.plies_since_progress >= PROGRESS_PLY_LIMIT


# --- ENCODING HELPERS ---
def _parse_enum(enum_cls: type[E], value: str, what: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise GameStateError(
            f"Invalid {what}: {value!r}. \nPick one from {', '.join(member.value for member in enum_cls)}"
        ) from None


def _recorded_move_to_entry(recorded: RecordedMove) -> RecordEntry:
    return {
        "move": recorded.move.to_notation(),
        "piece": recorded.moved_piece.to_key(),
        "captured": recorded.captured_piece.to_key() if recorded.captured_piece else None,
    }


def _entry_to_recorded_move(entry: RecordEntry) -> RecordedMove:
    try:
        move = Move.from_notation(entry["move"] or "")
        moved_piece = Piece.from_key(entry["piece"] or "")
        captured = entry.get("captured")
        return RecordedMove(move, moved_piece, Piece.from_key(captured) if captured else None)
    except (KeyError, InvalidSquareError) as error:
        raise GameStateError(f"Invalid record entry: {entry!r}") from error
