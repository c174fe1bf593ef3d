"""Bitboard Othello rules engine."""

from .board import (
    Board,
    apply,
    apply_move,
    apply_pass,
    flips,
    is_terminal,
    is_valid_move,
    legal_moves,
    must_pass,
    render,
    score,
    start_board,
    winner,
)
from .errors import InvalidCoordinate, InvalidMove, OthelloError
from .moves import PASS, Move, Pass, Place, Player
from .notation import coord_to_square, square_to_coord

__all__ = [
    "Board",
    "apply",
    "apply_move",
    "apply_pass",
    "flips",
    "is_terminal",
    "is_valid_move",
    "legal_moves",
    "must_pass",
    "render",
    "score",
    "start_board",
    "winner",
    "InvalidCoordinate",
    "InvalidMove",
    "OthelloError",
    "PASS",
    "Move",
    "Pass",
    "Place",
    "Player",
    "coord_to_square",
    "square_to_coord",
]
