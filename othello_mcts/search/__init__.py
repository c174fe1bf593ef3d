"""Monte Carlo Tree Search planner."""

from .planner import PRESETS, MCTSConfig, Planner, choose_move, preset
from .telemetry import Telemetry, summarize
from .tree import Node, SearchResult, SearchTree

__all__ = [
    "PRESETS",
    "MCTSConfig",
    "Planner",
    "choose_move",
    "preset",
    "Telemetry",
    "summarize",
    "Node",
    "SearchResult",
    "SearchTree",
]
