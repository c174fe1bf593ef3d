"""Serialisation schemas for boards, moves and search telemetry"""

from __future__ import annotations

from typing import List, Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .engine.board import Board
from .engine.moves import PASS, Move, Pass, Place, Player
from .engine.notation import coord_to_square, square_to_coord
from .search.telemetry import Telemetry

MASK64 = 0xFFFFFFFFFFFFFFFF


class BoardState(BaseModel):
    """Minimal lossless encoding of a board: two masks, side to move, pass count"""

    model_config = ConfigDict(frozen=True)

    black: int = Field(..., ge=0, le=MASK64, description="Black occupancy bitboard")
    white: int = Field(..., ge=0, le=MASK64, description="White occupancy bitboard")
    side_to_move: str = Field("black", description="'black' or 'white'")
    passes: int = Field(0, ge=0, description="Consecutive passes")

    @field_validator("side_to_move")
    @classmethod
    def _side(cls, v: str) -> str:
        v = v.lower()
        if v not in ("black", "white"):
            raise ValueError("side_to_move must be 'black' or 'white'")
        return v

    @model_validator(mode="after")
    def _disjoint(self) -> "BoardState":
        if self.black & self.white:
            raise ValueError("black and white masks overlap")
        return self

    @classmethod
    def from_board(cls, board: Board) -> "BoardState":
        return cls(
            black=board.black,
            white=board.white,
            side_to_move=board.side_to_move.name.lower(),
            passes=board.passes,
        )

    def to_board(self) -> Board:
        return Board(self.black, self.white, Player[self.side_to_move.upper()], self.passes)

    def to_json(self) -> str:
        return orjson.dumps(self.model_dump()).decode("utf-8")

    @classmethod
    def from_json(cls, json_str: str) -> "BoardState":
        return cls.model_validate(orjson.loads(json_str))


class MoveData(BaseModel):
    """A move on the wire: a coordinate label, or pass"""

    coord: Optional[str] = Field(None, description="Square label such as 'D3'; omitted for a pass")
    is_pass: bool = False

    @model_validator(mode="after")
    def _one_of(self) -> "MoveData":
        if self.is_pass == (self.coord is not None):
            raise ValueError("exactly one of coord or is_pass must be given")
        return self

    @classmethod
    def from_move(cls, move: Move) -> "MoveData":
        if isinstance(move, Pass):
            return cls(is_pass=True)
        return cls(coord=square_to_coord(move.square))

    def to_move(self) -> Move:
        if self.is_pass:
            return PASS
        return Place(coord_to_square(self.coord or ""))


class TelemetryData(BaseModel):
    """Summary of a finished search"""

    total_simulations: int
    visit_distribution: List[int]
    chosen_q_value: float
    average_depth: float = 0.0
    node_count: int = 0

    @classmethod
    def from_telemetry(cls, t: Telemetry) -> "TelemetryData":
        return cls(
            total_simulations=t.total_simulations,
            visit_distribution=list(t.visit_distribution),
            chosen_q_value=t.chosen_q_value,
            average_depth=t.average_depth,
            node_count=t.node_count,
        )
