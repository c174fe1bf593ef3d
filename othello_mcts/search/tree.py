"""Monte Carlo Tree Search over Othello positions.

The tree is an arena: every node lives in ``SearchTree.nodes`` and refers to
its parent and children by index. Each node owns the full board reached by the
move that created it.

One iteration of the search:

  1. Selection: from the root, descend to the child with the highest UCT
     priority until a node without children is reached. Unvisited children
     have infinite priority; ties go to the first child in generation order.
  2. Expansion: a non-terminal leaf gets one child per legal placement, or a
     single pass child when the side to move has no placement.
  3. Rollout: each new child is played out with uniformly random moves until
     neither side can move.
  4. Backpropagation: every node from the child up to the root gains one
     visit and the rollout result, credited to the player who made the move
     into that node (1.0 win, 0.5 draw, 0.0 loss).

A terminal leaf produces no children; its exact result is backpropagated
from the leaf itself so the iteration still counts.

The exploration term is ``C * ln(N_parent) / N_child`` without a square root.
"""

from __future__ import annotations

import logging
import math
import random
import time
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from ..engine.board import Board, apply, is_terminal, legal_moves
from ..engine.moves import PASS, Move, Place, Player
from ..engine.movegen import flip_mask, legal_moves_mask, squares
from .telemetry import Telemetry, summarize

log = logging.getLogger(__name__)


@dataclass
class SearchResult:
    move: Optional[Move]  # None when the root is terminal
    telemetry: Telemetry


class Node:
    __slots__ = ("visits", "score", "board", "move", "parent", "children", "mover")

    def __init__(self, board: Board, parent: Optional[int], move: Optional[Move]) -> None:
        self.visits = 0
        self.score = 0.0
        self.board = board
        self.move = move
        self.parent = parent
        self.children: List[int] = []
        # Player whose move led here; results are credited from this side
        self.mover = board.side_to_move.opponent()

    def uct(self, parent_visits: int, c: float) -> float:
        if self.visits == 0:
            return math.inf
        return self.score / self.visits + c * math.log(parent_visits) / self.visits

    def __repr__(self) -> str:
        return f"Node(move={self.move}, N={self.visits}, W={self.score}, children={len(self.children)})"


def _result(black: int, white: int) -> Optional[Player]:
    b = black.bit_count()
    w = white.bit_count()
    if b > w:
        return Player.BLACK
    if w > b:
        return Player.WHITE
    return None


def _credit(winner: Optional[Player], side: Player) -> float:
    if winner is None:
        return 0.5
    return 1.0 if winner is side else 0.0


class SearchTree:
    def __init__(self, board: Board, exploration: float = 1.41, seed: Optional[int] = None) -> None:
        self.nodes: List[Node] = [Node(board, None, None)]
        self.exploration = exploration
        self.root = 0
        self.rng = random.Random(seed)

    @property
    def root_node(self) -> Node:
        return self.nodes[self.root]

    @property
    def root_board(self) -> Board:
        return self.nodes[self.root].board

    def __len__(self) -> int:
        return len(self.nodes)

    # -- search phases -------------------------------------------------------

    def select_leaf(self) -> int:
        idx = self.root
        nodes = self.nodes
        c = self.exploration
        while nodes[idx].children:
            parent_visits = nodes[idx].visits
            best = -1
            best_value = -math.inf
            for child in nodes[idx].children:
                value = nodes[child].uct(parent_visits, c)
                if best < 0 or value > best_value:
                    best = child
                    best_value = value
            idx = best
        return idx

    def expand(self, idx: int) -> List[int]:
        node = self.nodes[idx]
        board = node.board
        if node.children or is_terminal(board):
            return []
        moves: List[Move] = [Place(sq) for sq in legal_moves(board)]
        if not moves:
            moves = [PASS]
        new_children: List[int] = []
        for mv in moves:
            child = len(self.nodes)
            self.nodes.append(Node(apply(board, mv), idx, mv))
            node.children.append(child)
            new_children.append(child)
        return new_children

    def rollout(self, board: Board) -> Optional[Player]:
        """Play random moves to the end; return the winner (None on a tie)."""
        own, opp = board.own_opp()
        side = board.side_to_move
        rng = self.rng
        while True:
            mask = legal_moves_mask(own, opp)
            if mask:
                moves = squares(mask)
                sq = moves[rng.randrange(len(moves))]
                f = flip_mask(own, opp, sq)
                own |= f | (1 << sq)
                opp &= ~f
            elif not legal_moves_mask(opp, own):
                break
            own, opp = opp, own
            side = side.opponent()
        if side is Player.BLACK:
            return _result(own, opp)
        return _result(opp, own)

    def backpropagate(self, idx: Optional[int], winner: Optional[Player]) -> None:
        nodes = self.nodes
        while idx is not None:
            node = nodes[idx]
            node.visits += 1
            node.score += _credit(winner, node.mover)
            idx = node.parent

    def run(self, iterations: int) -> None:
        for _ in range(iterations):
            leaf = self.select_leaf()
            children = self.expand(leaf)
            if not children:
                board = self.nodes[leaf].board
                self.backpropagate(leaf, _result(board.black, board.white))
                continue
            for child in children:
                self.backpropagate(child, self.rollout(self.nodes[child].board))

    # -- results -------------------------------------------------------------

    def most_visited_child(self) -> Optional[int]:
        best: Optional[int] = None
        for child in self.root_node.children:
            if best is None or self.nodes[child].visits > self.nodes[best].visits:
                best = child
        return best

    def pick_child(self, temperature: float) -> Optional[int]:
        children = self.root_node.children
        if temperature == 0 or not children:
            return self.most_visited_child()
        visits = np.array([self.nodes[c].visits for c in children], dtype=np.float64)
        if not visits.any():
            return self.most_visited_child()
        # visits ** (1/T) in log space, shifted so the largest weight is 1;
        # unvisited children keep weight 0
        with np.errstate(divide="ignore"):
            log_visits = np.log(visits) / temperature
        weights = np.exp(log_visits - log_visits.max())
        cumulative = np.cumsum(weights)
        target = self.rng.random() * float(cumulative[-1])
        i = int(np.searchsorted(cumulative, target, side="right"))
        if i >= len(children):
            # rounding left the draw past the last bucket
            return self.most_visited_child()
        return children[i]

    def search(self, iterations: int, temperature: float = 0.0) -> SearchResult:
        """Run `iterations` MCTS iterations from the current root and pick a move.

        A terminal root yields no move and performs no iterations. With a zero
        budget the root is expanded without rollouts and the first legal move
        in generation order is returned.
        """
        start = time.perf_counter()
        if is_terminal(self.root_board):
            log.debug("search skipped: root position is terminal")
            return SearchResult(None, summarize(self))
        if iterations <= 0:
            self.expand(self.root)
        else:
            self.run(iterations)
        chosen = self.pick_child(temperature)
        move = self.nodes[chosen].move if chosen is not None else None
        telemetry = summarize(self)
        log.debug(
            "search done: iterations=%d sims=%d nodes=%d move=%s q=%.3f in %.1fms",
            iterations,
            telemetry.total_simulations,
            telemetry.node_count,
            move,
            telemetry.chosen_q_value,
            (time.perf_counter() - start) * 1000,
        )
        return SearchResult(move, telemetry)

    # -- tree reuse ----------------------------------------------------------

    def advance_root(self, move: Move) -> bool:
        """Re-root at the child reached by `move`, dropping everything else.

        Returns False when the root has no such child; the tree is unchanged.
        """
        for child in self.root_node.children:
            if self.nodes[child].move == move:
                self._compact(child)
                return True
        return False

    def _compact(self, new_root: int) -> None:
        # Breadth-first copy of the surviving subtree into a fresh arena
        remap: Dict[int, int] = {new_root: 0}
        order = [new_root]
        queue = deque([new_root])
        while queue:
            idx = queue.popleft()
            for child in self.nodes[idx].children:
                remap[child] = len(order)
                order.append(child)
                queue.append(child)
        arena: List[Node] = []
        for old in order:
            node = self.nodes[old]
            node.parent = remap[node.parent] if old != new_root else None
            node.children = [remap[c] for c in node.children]
            arena.append(node)
        arena[0].move = None
        dropped = len(self.nodes) - len(arena)
        self.nodes = arena
        self.root = 0
        log.debug("advanced root: kept=%d dropped=%d", len(arena), dropped)
