from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from ..engine.board import Board, legal_mask
from ..engine.moves import PASS, Move
from .telemetry import Telemetry, summarize
from .tree import SearchResult, SearchTree

log = logging.getLogger(__name__)


@dataclass
class MCTSConfig:
    iterations: int = 1000
    exploration: float = 1.41
    temperature: float = 0.0  # 0 = always the most visited move
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if self.temperature < 0:
            raise ValueError(f"temperature must be >= 0, got {self.temperature}")


# Named strength presets, mapped to iteration budgets.
PRESETS = {
    "fast": MCTSConfig(iterations=100),
    "standard": MCTSConfig(iterations=400),
    "strong": MCTSConfig(iterations=1000),
}


def preset(name: str) -> MCTSConfig:
    if name not in PRESETS:
        raise KeyError(f"unknown preset {name!r}; choose from {sorted(PRESETS)}")
    p = PRESETS[name]
    return MCTSConfig(p.iterations, p.exploration, p.temperature, p.seed)


def choose_move(board: Board, config: Optional[MCTSConfig] = None) -> Move:
    """Run a fresh search and return the move to play.

    Returns PASS when the side to move has no placement, including when the
    game is already over.
    """
    cfg = config or MCTSConfig()
    if legal_mask(board) == 0:
        return PASS
    tree = SearchTree(board, cfg.exploration, cfg.seed)
    result = tree.search(cfg.iterations, cfg.temperature)
    return result.move if result.move is not None else PASS


class Planner:
    """MCTS player that keeps its tree between turns.

    Call ``select_move`` for a decision and ``notify_move`` with every move
    actually played (by either side) so the tree can be re-rooted instead of
    rebuilt.
    """

    def __init__(self, config: Optional[MCTSConfig] = None) -> None:
        self.config = config or MCTSConfig()
        self.tree: Optional[SearchTree] = None
        self._seeds = random.Random(self.config.seed)
        self.rebuilds = 0
        self.reuses = 0

    def _new_tree(self, board: Board) -> SearchTree:
        seed = self._seeds.getrandbits(64) if self.config.seed is not None else None
        self.rebuilds += 1
        return SearchTree(board, self.config.exploration, seed)

    def select_move(self, board: Board) -> SearchResult:
        if self.tree is None or self.tree.root_board != board:
            if self.tree is not None:
                log.debug("retained tree does not match position; rebuilding")
            self.tree = self._new_tree(board)
        return self.tree.search(self.config.iterations, self.config.temperature)

    def notify_move(self, move: Move) -> bool:
        """Advance the retained tree past `move`. Returns True if it was reused."""
        if self.tree is None:
            return False
        if self.tree.advance_root(move):
            self.reuses += 1
            return True
        log.debug("no child for %s in retained tree; discarding", move)
        self.tree = None
        return False

    def reset(self) -> None:
        self.tree = None

    def telemetry(self) -> Telemetry:
        if self.tree is None:
            return Telemetry()
        return summarize(self.tree)
