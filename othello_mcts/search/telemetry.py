from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from .tree import SearchTree


@dataclass(frozen=True)
class Telemetry:
    """Read-only summary of a finished search, taken at the root."""

    total_simulations: int = 0
    visit_distribution: Tuple[int, ...] = ()  # child order
    chosen_q_value: float = 0.0  # score/visits of the most visited child
    average_depth: float = 0.0  # not tracked
    node_count: int = 0


def summarize(tree: "SearchTree") -> Telemetry:
    root = tree.root_node
    visits = tuple(tree.nodes[c].visits for c in root.children)
    q = 0.0
    best = tree.most_visited_child()
    if best is not None and tree.nodes[best].visits > 0:
        q = tree.nodes[best].score / tree.nodes[best].visits
    return Telemetry(
        total_simulations=root.visits,
        visit_distribution=visits,
        chosen_q_value=q,
        average_depth=0.0,
        node_count=len(tree.nodes),
    )
