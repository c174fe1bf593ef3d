from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Player(Enum):
    BLACK = 0
    WHITE = 1

    def opponent(self) -> "Player":
        return Player.WHITE if self is Player.BLACK else Player.BLACK

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Place:
    square: int  # 0..63


@dataclass(frozen=True)
class Pass:
    pass


Move = Union[Place, Pass]

PASS = Pass()
