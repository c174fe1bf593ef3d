from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .errors import InvalidMove
from .moves import Move, Pass, Place, Player
from .movegen import FULL, flip_mask, legal_moves_mask, squares

# Terminal rule: the game is over when neither side has a legal placement in the
# current disc configuration. The pass counter is bookkeeping only and is never
# consulted to decide whether the game has ended.


@dataclass(frozen=True)
class Board:
    black: int
    white: int
    side_to_move: Player = Player.BLACK
    passes: int = 0  # consecutive passes

    def __post_init__(self) -> None:
        if self.black & self.white:
            raise ValueError("black and white occupancy masks overlap")
        if not (0 <= self.black <= FULL and 0 <= self.white <= FULL):
            raise ValueError("occupancy masks must fit in 64 bits")

    @property
    def occupied(self) -> int:
        return self.black | self.white

    def own_opp(self) -> Tuple[int, int]:
        if self.side_to_move is Player.BLACK:
            return self.black, self.white
        return self.white, self.black


def start_board() -> Board:
    # White on D4/E5, Black on E4/D5
    black = (1 << 28) | (1 << 35)
    white = (1 << 27) | (1 << 36)
    return Board(black, white, Player.BLACK, 0)


def flips(board: Board, square: int) -> int:
    """Bitmask of opponent discs flipped if the side to move plays `square`."""
    if not 0 <= square < 64:
        return 0
    own, opp = board.own_opp()
    return flip_mask(own, opp, square)


def legal_mask(board: Board) -> int:
    own, opp = board.own_opp()
    return legal_moves_mask(own, opp)


def legal_moves(board: Board) -> List[int]:
    """Legal placements for the side to move, ascending by square."""
    return squares(legal_mask(board))


def is_valid_move(board: Board, square: int) -> bool:
    if not 0 <= square < 64:
        return False
    if board.occupied & (1 << square):
        return False
    return flips(board, square) != 0


def apply_move(board: Board, square: int) -> Board:
    if not 0 <= square < 64:
        raise InvalidMove(square, "square out of range")
    bit = 1 << square
    if board.occupied & bit:
        raise InvalidMove(square, "square is already occupied")
    own, opp = board.own_opp()
    f = flip_mask(own, opp, square)
    if f == 0:
        raise InvalidMove(square, "move does not flip any discs")
    own |= bit | f
    opp &= ~f & FULL
    if board.side_to_move is Player.BLACK:
        return Board(own, opp, Player.WHITE, 0)
    return Board(opp, own, Player.BLACK, 0)


def apply_pass(board: Board) -> Board:
    return replace(board, side_to_move=board.side_to_move.opponent(), passes=board.passes + 1)


def apply(board: Board, move: Move) -> Board:
    if isinstance(move, Pass):
        return apply_pass(board)
    if isinstance(move, Place):
        return apply_move(board, move.square)
    raise TypeError(f"not a move: {move!r}")


def has_legal_move(board: Board, player: Player) -> bool:
    if player is Player.BLACK:
        return legal_moves_mask(board.black, board.white) != 0
    return legal_moves_mask(board.white, board.black) != 0


def is_terminal(board: Board) -> bool:
    return not has_legal_move(board, Player.BLACK) and not has_legal_move(board, Player.WHITE)


def must_pass(board: Board) -> bool:
    """The side to move has no placement but the opponent still does."""
    return legal_mask(board) == 0 and has_legal_move(board, board.side_to_move.opponent())


def score(board: Board) -> Tuple[int, int]:
    return board.black.bit_count(), board.white.bit_count()


def winner(board: Board) -> Optional[Player]:
    """Player with more discs once the game is over; None on a tie or mid-game."""
    if not is_terminal(board):
        return None
    b, w = score(board)
    if b > w:
        return Player.BLACK
    if w > b:
        return Player.WHITE
    return None


def render(board: Board, show_moves: bool = False) -> str:
    """Text diagram of the board, rank 1 on top. Legal moves shown as '*' if asked."""
    hints = legal_mask(board) if show_moves else 0
    lines = ["  A B C D E F G H"]
    for row in range(8):
        cells = []
        for col in range(8):
            bit = 1 << (row * 8 + col)
            if board.black & bit:
                cells.append("B")
            elif board.white & bit:
                cells.append("W")
            elif hints & bit:
                cells.append("*")
            else:
                cells.append(".")
        lines.append(f"{row + 1} " + " ".join(cells))
    return "\n".join(lines)
