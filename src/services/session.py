"""
A single game being played, as seen by whatever hosts it (UI, service, tests).

The session owns the Game and the way it is played (mode, opponent difficulty, which side the human plays).
It also drives the computer opponent. The opponent's move is computed right away, but applying it may be
deferred ("thinking time"). While deferred, the game may change (resign, draw, reset, mode change).
Every mutation bumps the session's generation, and a computed opponent move is only applied when:
* it was computed for the current generation,
* the game is still being played,
* and it is still the opponent's turn.
Otherwise it is discarded. At most one opponent computation is outstanding at any time.
"""

import logging
import random
import threading
from dataclasses import dataclass
from typing import Optional, Self

from src.core.config import Settings, settings
from src.core.exceptions import GameStateError
from src.core.models import SessionModel
from src.core.shared_types import (
    Difficulty,
    DrawReason,
    GameMode,
    MoveResult,
    Side,
    Status,
)
from src.xiangqi.game import Game
from src.xiangqi.moves import Move, RecordedMove
from src.xiangqi.opponent import choose_move
from src.xiangqi.pieces import Piece
from src.xiangqi.square import Square

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpponentTicket:
    """An opponent move computed for one specific generation of the session"""

    generation: int
    side: Side
    move: Optional[Move]


class GameSession:
    def __init__(
        self,
        game: Optional[Game] = None,
        mode: Optional[GameMode] = None,
        difficulty: Optional[Difficulty] = None,
        human_side: Optional[Side] = None,
        config: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or settings
        self.game = game or Game.new_game()
        self.mode = mode or self.config.default_mode
        self.difficulty = difficulty or self.config.default_difficulty
        self.human_side = human_side or self.config.default_human_side
        self.generation = 0
        self.rng = rng or random.Random()
        self._pending: Optional[OpponentTicket] = None
        # the timer thread of a deferred opponent move is the only other writer
        self._lock = threading.RLock()

    # --- PERSISTENCE ---
    @classmethod
    def from_model(cls, model: SessionModel, config: Optional[Settings] = None) -> Self:
        try:
            mode = GameMode(model.mode)
            difficulty = Difficulty(model.difficulty)
            human_side = Side(model.human_side)
        except ValueError as error:
            raise GameStateError(f"Invalid session settings: {error}") from error
        session = cls(
            game=Game.from_model(model.game),
            mode=mode,
            difficulty=difficulty,
            human_side=human_side,
            config=config,
        )
        session.generation = model.generation
        return session

    def to_model(self) -> SessionModel:
        with self._lock:
            return SessionModel(
                game=self.game.to_model(),
                mode=self.mode.value,
                difficulty=self.difficulty.value,
                human_side=self.human_side.value,
                generation=self.generation,
            )

    # --- INPUT BOUNDARY ---
    def request_move(self, from_square: Square, to_square: Square) -> MoveResult:
        """A move requested by a human player"""
        with self._lock:
            if self.mode == GameMode.VS_OPPONENT and not self.game.is_over and (
                self._pending is not None or self.game.side_to_move != self.human_side
            ):
                return MoveResult.NOT_YOUR_TURN
            return self._apply(from_square, to_square)

    def request_resign(self, side: Side) -> MoveResult:
        with self._lock:
            return self._mutate(self.game.resign(side))

    def request_draw(self) -> MoveResult:
        with self._lock:
            return self._mutate(self.game.propose_draw())

    def request_reset(self) -> None:
        with self._lock:
            self.game.reset()
            self._mutate(MoveResult.OK)

    def set_opponent_difficulty(self, difficulty: Difficulty) -> None:
        """Takes effect from the next opponent move on. No effect on the board."""
        with self._lock:
            self.difficulty = difficulty

    def set_human_side(self, side: Side) -> None:
        with self._lock:
            self.human_side = side

    def set_mode(self, mode: GameMode) -> None:
        """Changing the mode starts a new game."""
        with self._lock:
            self.mode = mode
            self.request_reset()

    # --- OUTPUT BOUNDARY (read-only, under the lock: the timer thread may be applying a move) ---
    def piece_at(self, square: Square) -> Optional[Piece]:
        with self._lock:
            return self.game.piece_at(square)

    @property
    def board_key(self) -> str:
        with self._lock:
            return self.game.board.to_key()

    @property
    def side_to_move(self) -> Side:
        with self._lock:
            return self.game.side_to_move

    @property
    def status(self) -> Status:
        with self._lock:
            return self.game.status

    @property
    def winner(self) -> Optional[Side]:
        with self._lock:
            return self.game.winner

    @property
    def draw_reason(self) -> Optional[DrawReason]:
        with self._lock:
            return self.game.draw_reason

    @property
    def record(self) -> list[RecordedMove]:
        """A copy. Appending to it does not touch the game."""
        with self._lock:
            return list(self.game.record)

    @property
    def plies_since_progress(self) -> int:
        with self._lock:
            return self.game.plies_since_progress

    @property
    def opponent_side(self) -> Side:
        with self._lock:
            return self.human_side.opponent

    @property
    def is_opponent_thinking(self) -> bool:
        with self._lock:
            return self._pending is not None

    def is_legal(self, from_square: Square, to_square: Square) -> bool:
        with self._lock:
            return self.game.is_legal(from_square, to_square)

    def is_in_check(self, side: Side) -> bool:
        with self._lock:
            return self.game.is_in_check(side)

    def legal_targets(self, from_square: Square) -> list[Square]:
        """Squares to highlight once a piece is picked up. Nothing to highlight once the game is over."""
        with self._lock:
            if self.game.is_over:
                return []
            return self.game.legal_targets(from_square)

    # --- COMPUTER OPPONENT ---
    def begin_opponent_turn(self) -> Optional[OpponentTicket]:
        """
        Compute the opponent's move now, to be applied later with complete_opponent_turn().

        Returns None (request ignored) when the opponent is not supposed to move:
        not playing against the opponent, game over, not its turn, or it is already thinking.
        """
        with self._lock:
            if self.mode != GameMode.VS_OPPONENT or self.game.is_over:
                return None
            if self.game.side_to_move != self.opponent_side:
                return None
            if self._pending is not None:
                logger.debug("Opponent already thinking, request ignored")
                return None

            move = choose_move(self.game.board, self.opponent_side, self.difficulty, self.rng)
            self._pending = OpponentTicket(self.generation, self.opponent_side, move)
            return self._pending

    def complete_opponent_turn(self, ticket: OpponentTicket) -> bool:
        """Apply the computed move, unless the session moved on since it was computed. Returns True if applied."""
        with self._lock:
            if ticket is self._pending:
                self._pending = None

            is_current = (
                ticket.generation == self.generation
                and not self.game.is_over
                and self.game.side_to_move == ticket.side
            )
            if not is_current or ticket.move is None:
                logger.info(
                    "Discarded opponent move computed for generation %d (now %d, status %s)",
                    ticket.generation,
                    self.generation,
                    self.game.status,
                )
                return False

            result = self._apply(ticket.move.from_square, ticket.move.to_square)
            return result == MoveResult.OK

    def play_opponent_move(self) -> bool:
        """Compute and apply the opponent's move without any delay"""
        with self._lock:
            ticket = self.begin_opponent_turn()
            if ticket is None:
                return False
            return self.complete_opponent_turn(ticket)

    def schedule_opponent_move(self, delay: Optional[float] = None) -> Optional[threading.Timer]:
        """
        Compute the opponent's move and apply it after `delay` seconds
        (random 'thinking time' within the configured range by default).

        Returns the started timer, or None when the request was ignored.
        """
        ticket = self.begin_opponent_turn()
        if ticket is None:
            return None

        if delay is None:
            delay = self.rng.uniform(self.config.opponent_delay_min, self.config.opponent_delay_max)
        timer = threading.Timer(delay, self.complete_opponent_turn, args=(ticket,))
        timer.daemon = True
        timer.start()
        return timer

    # -- PRIVATE HELPERS ---
    def _apply(self, from_square: Square, to_square: Square) -> MoveResult:
        return self._mutate(self.game.apply_move(from_square, to_square))

    def _mutate(self, result: MoveResult) -> MoveResult:
        """Anything that changed the game invalidates (and stops waiting for) opponent moves computed before."""
        if result == MoveResult.OK:
            self.generation += 1
            self._pending = None
        return result
