from __future__ import annotations


class OthelloError(ValueError):
    """Base class for caller-correctable engine errors."""


class InvalidMove(OthelloError):
    """Occupied square, out-of-range square, or a placement that flips nothing."""

    def __init__(self, square: int, reason: str) -> None:
        super().__init__(f"invalid move at square {square}: {reason}")
        self.square = square
        self.reason = reason


class InvalidCoordinate(OthelloError):
    """Malformed or out-of-range coordinate label."""

    def __init__(self, label: object, reason: str) -> None:
        super().__init__(f"invalid coordinate {label!r}: {reason}")
        self.label = label
        self.reason = reason
