from __future__ import annotations

from typing import Iterable, Optional

from .board import Board, apply, apply_move, apply_pass, is_terminal, legal_mask, start_board
from .movegen import squares
from .notation import notation_to_move


def perft(board: Board, depth: int) -> int:
    """Leaf count of the move tree; a forced pass counts as one move."""
    if depth == 0 or is_terminal(board):
        return 1
    mask = legal_mask(board)
    if mask == 0:
        return perft(apply_pass(board), depth - 1)
    total = 0
    for sq in squares(mask):
        total += perft(apply_move(board, sq), depth - 1)
    return total


def play_moves(board: Optional[Board], moves: Iterable[str]) -> Board:
    """Replay coordinate labels (or '--' passes) from `board` or the start."""
    b = start_board() if board is None else board
    for mv in moves:
        b = apply(b, notation_to_move(mv))
    return b
