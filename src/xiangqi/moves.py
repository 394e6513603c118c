"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the movement rule for each piece kind.
Every rule answers "could this piece go from A to B on this board?", ignoring whose turn it is and
whether the own king ends up in check. That part is checked later by the validator.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.core.shared_types import PieceKind, Side
from src.xiangqi.pieces import Piece
from src.xiangqi.square import Square

# ranks 0-4 belong to Black, 5-9 to Red. The river runs between rank 4 and 5
RIVER_BOUNDARY = 5
PALACE_FILES = range(3, 6)
PALACE_RANKS: dict[Side, range] = {
    Side.RED: range(7, 10),
    Side.BLACK: range(0, 3),
}
# Red moves UP the board (towards rank 0), Black moves DOWN
FORWARD: dict[Side, int] = {Side.RED: -1, Side.BLACK: 1}


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_occupied(self, square: Square) -> bool: ...
    def find_king(self, side: Side) -> Optional[Square]: ...
    def locate_side(self, side: Side) -> list[Square]: ...
    def after_move(self, from_square: Square, to_square: Square) -> "Board": ...


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_notation(cls, notation: str) -> Self:
        """
        <from_square><to_square>, ex)
        * "h7e7": the piece on h7 (Red's right cannon) moves to e7
        * "b9c7": Red's left knight jumps to c7
        """
        return cls(Square.from_notation(notation[:2]), Square.from_notation(notation[2:]))

    def to_notation(self) -> str:
        return f"{self.from_square.to_notation()}{self.to_square.to_notation()}"


@dataclass(frozen=True)
class RecordedMove:
    """Entry of the game record: a move that has been played + snapshot of the pieces involved"""

    move: Move
    moved_piece: Piece
    captured_piece: Optional[Piece] = None

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def is_pawn_move(self) -> bool:
        return self.moved_piece.kind == PieceKind.PAWN


# --- HELPERS ---
def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Squares strictly in between two squares on the same file or rank.

    Raises a ValueError otherwise: callers must check the geometry first.
    """
    if from_square.file != to_square.file and from_square.rank != to_square.rank:
        raise ValueError(
            f"squares_between requires both squares to lie on the same file or rank. \n from: {from_square}\n to:{to_square}"
        )
    df = (to_square.file > from_square.file) - (to_square.file < from_square.file)
    dr = (to_square.rank > from_square.rank) - (to_square.rank < from_square.rank)
    squares: list[Square] = []
    file, rank = from_square.file + df, from_square.rank + dr
    while (file, rank) != (to_square.file, to_square.rank):
        squares.append(Square(file, rank))
        file += df
        rank += dr
    return squares


def count_between(board: Board, from_square: Square, to_square: Square) -> int:
    """Number of pieces standing strictly in between two squares on a straight line"""
    return sum(board.is_occupied(square) for square in squares_between(from_square, to_square))


def is_straight_line(from_square: Square, to_square: Square) -> bool:
    return from_square != to_square and (
        from_square.file == to_square.file or from_square.rank == to_square.rank
    )


def is_in_palace(square: Square, side: Side) -> bool:
    return square.file in PALACE_FILES and square.rank in PALACE_RANKS[side]


def is_on_own_half(square: Square, side: Side) -> bool:
    if side == Side.RED:
        return square.rank >= RIVER_BOUNDARY
    return square.rank < RIVER_BOUNDARY


def has_crossed_river(square: Square, side: Side) -> bool:
    return not is_on_own_half(square, side)


def kings_facing(board: Board) -> bool:
    """The 'flying general': both kings on the same file without anything in between."""
    red_king = board.find_king(Side.RED)
    black_king = board.find_king(Side.BLACK)
    if red_king is None or black_king is None:
        return False
    if red_king.file != black_king.file:
        return False
    return count_between(board, red_king, black_king) == 0


def _displacement(from_square: Square, to_square: Square) -> tuple[int, int]:
    return to_square.file - from_square.file, to_square.rank - from_square.rank


# --- MOVEMENT RULES ---
def is_valid_rook_move(board: Board, from_square: Square, to_square: Square, side: Side) -> bool:
    """Rooks move along a file or rank, as far as nothing is in the way"""
    if not is_straight_line(from_square, to_square):
        return False
    return count_between(board, from_square, to_square) == 0


def is_valid_knight_move(board: Board, from_square: Square, to_square: Square, side: Side) -> bool:
    """
    Knights jump |delta_file| + |delta_rank| = 3 (never in a straight line)

    NOTE: unlike its western cousin, the knight can be blocked. The 'leg' is the square one step along the
    long axis of the jump. If anything stands there, the jump is not possible.
    """
    df, dr = _displacement(from_square, to_square)
    if {abs(df), abs(dr)} != {1, 2}:
        return False
    if abs(df) == 2:
        leg = Square(from_square.file + df // 2, from_square.rank)
    else:
        leg = Square(from_square.file, from_square.rank + dr // 2)
    return not board.is_occupied(leg)


def is_valid_elephant_move(board: Board, from_square: Square, to_square: Square, side: Side) -> bool:
    """
    Elephants move exactly two squares diagonally
    ----
    * The midpoint ('eye') must be empty
    * They never cross the river
    """
    df, dr = _displacement(from_square, to_square)
    if abs(df) != 2 or abs(dr) != 2:
        return False
    if not is_on_own_half(to_square, side):
        return False
    eye = Square(from_square.file + df // 2, from_square.rank + dr // 2)
    return not board.is_occupied(eye)


def is_valid_advisor_move(board: Board, from_square: Square, to_square: Square, side: Side) -> bool:
    """Advisors step one square diagonally and never leave the palace"""
    df, dr = _displacement(from_square, to_square)
    if abs(df) != 1 or abs(dr) != 1:
        return False
    return is_in_palace(from_square, side) and is_in_palace(to_square, side)


def is_valid_king_move(board: Board, from_square: Square, to_square: Square, side: Side) -> bool:
    """
    The king steps one square horizontally or vertically, inside its palace.

    Additionally, the kings may never face each other on an open file: simulate the move and look.
    """
    df, dr = _displacement(from_square, to_square)
    if abs(df) + abs(dr) != 1:
        return False
    if not is_in_palace(to_square, side):
        return False
    if board.piece(from_square) is None:
        return False
    return not kings_facing(board.after_move(from_square, to_square))


def is_valid_cannon_move(board: Board, from_square: Square, to_square: Square, side: Side) -> bool:
    """
    Cannons move like rooks
    ----
    but when capturing they need to jump over exactly one piece (of any side), the 'screen'.
    """
    if not is_straight_line(from_square, to_square):
        return False
    pieces_in_between = count_between(board, from_square, to_square)
    if board.is_occupied(to_square):
        return pieces_in_between == 1
    return pieces_in_between == 0


def is_valid_pawn_move(board: Board, from_square: Square, to_square: Square, side: Side) -> bool:
    """
    Pawns (soldiers) step one square forward.
    After crossing the river they may also step one square sideways. Never backwards, never diagonal.
    """
    df, dr = _displacement(from_square, to_square)
    if df == 0 and dr == FORWARD[side]:
        return True
    return has_crossed_river(from_square, side) and abs(df) == 1 and dr == 0


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Board, Square, Square, Side], bool]
MOVEMENT_RULES: dict[PieceKind, MovementRuleFn] = {
    PieceKind.ROOK: is_valid_rook_move,
    PieceKind.KNIGHT: is_valid_knight_move,
    PieceKind.ELEPHANT: is_valid_elephant_move,
    PieceKind.ADVISOR: is_valid_advisor_move,
    PieceKind.KING: is_valid_king_move,
    PieceKind.CANNON: is_valid_cannon_move,
    PieceKind.PAWN: is_valid_pawn_move,
}


def follows_movement_rule(board: Board, from_square: Square, to_square: Square) -> bool:
    """Look up the piece on the starting square and apply its movement rule"""
    piece = board.piece(from_square)
    if piece is None:
        return False
    return MOVEMENT_RULES[piece.kind](board, from_square, to_square, piece.side)


# --- ATTACKING RULES ---
def is_attacked(square: Square, by_side: Side, board: Board) -> bool:
    """
    Is the square in the line-of-sight of any piece of `by_side`?
    ---

    A piece attacks a square when its movement rule allows it to go there.
    On top of that, a king standing on the square is 'attacked' by the opposing king when the two face
    each other on an open file.

    NOTE: this is the low-level layer. It must never call the validator's is_legal.
    """
    for attacker in board.locate_side(by_side):
        if follows_movement_rule(board, attacker, square):
            return True

    target = board.piece(square)
    if target is not None and target.kind == PieceKind.KING and target.side != by_side:
        return kings_facing(board)
    return False
