"""
Coordinate notation for Othello moves.

Squares 0-63 map to two-character labels such as 'D3'. Column letters run A-H
left to right and ranks 1-8 top to bottom of the printed board, so A1 is
square 0 and H8 is square 63. Labels are accepted in either case and always
produced in upper case. A game record is the concatenation of move labels,
with '--' standing for a pass.
"""

from __future__ import annotations

from typing import List, Sequence

from .errors import InvalidCoordinate
from .moves import PASS, Move, Pass, Place

PASS_NOTATION = "--"
FILES = "ABCDEFGH"


def square_to_coord(square: int) -> str:
    """Convert board square (0-63) to coordinate notation (e.g. 'E4')."""
    if not isinstance(square, int) or square < 0 or square > 63:
        raise InvalidCoordinate(square, "square must be in 0..63")
    return f"{FILES[square % 8]}{square // 8 + 1}"


def coord_to_square(label: str) -> int:
    """Convert coordinate notation (e.g. 'e4') to board square (0-63)."""
    if not isinstance(label, str) or len(label) != 2:
        raise InvalidCoordinate(label, "coordinate must be exactly 2 characters")
    col = label[0].upper()
    row = label[1]
    if col not in FILES:
        raise InvalidCoordinate(label, "column must be A-H")
    if row not in "12345678":
        raise InvalidCoordinate(label, "row must be 1-8")
    return (int(row) - 1) * 8 + FILES.index(col)


def move_to_notation(move: Move) -> str:
    if isinstance(move, Pass):
        return PASS_NOTATION
    return square_to_coord(move.square)


def notation_to_move(text: str) -> Move:
    if text == PASS_NOTATION:
        return PASS
    return Place(coord_to_square(text))


def moves_to_string(moves: Sequence[Move]) -> str:
    """Convert a list of moves to a game-record string."""
    return "".join(move_to_notation(m) for m in moves)


def string_to_moves(moves_str: str) -> List[Move]:
    """Parse a game-record string. Raises InvalidCoordinate on malformed input."""
    if len(moves_str) % 2:
        raise InvalidCoordinate(moves_str, "incomplete move at end of record")
    return [notation_to_move(moves_str[i : i + 2]) for i in range(0, len(moves_str), 2)]


def is_valid_notation(moves_str: str) -> bool:
    try:
        string_to_moves(moves_str)
    except InvalidCoordinate:
        return False
    return True
