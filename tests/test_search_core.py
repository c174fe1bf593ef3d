from __future__ import annotations

import math

import pytest

from othello_mcts.engine.board import Board, apply, apply_move, legal_moves, start_board
from othello_mcts.engine.moves import PASS, Place, Player
from othello_mcts.search.tree import Node, SearchTree


def subtree_stats(tree: SearchTree, idx: int, path=()):
    """Map move path (relative to idx) -> (visits, score) for every node below idx."""
    node = tree.nodes[idx]
    out = {path: (node.visits, node.score)}
    for child in node.children:
        out.update(subtree_stats(tree, child, path + (tree.nodes[child].move,)))
    return out


class TestUCT:
    def test_unvisited_is_infinite(self):
        n = Node(start_board(), 0, Place(19))
        assert n.uct(10, 1.41) == math.inf

    def test_formula_has_no_square_root(self):
        n = Node(start_board(), 0, Place(19))
        n.visits = 2
        n.score = 1.0
        assert n.uct(10, 1.41) == pytest.approx(0.5 + 1.41 * math.log(10) / 2)

    def test_mover_is_player_who_moved_in(self):
        child = Node(apply_move(start_board(), 19), 0, Place(19))
        assert child.mover is Player.BLACK


class TestPhases:
    def test_expand_creates_child_per_legal_move(self):
        tree = SearchTree(start_board(), seed=1)
        children = tree.expand(tree.root)
        assert [tree.nodes[c].move for c in children] == [Place(sq) for sq in legal_moves(start_board())]
        for c in children:
            assert tree.nodes[c].parent == tree.root
            assert tree.nodes[c].board == apply(start_board(), tree.nodes[c].move)
        # a second expansion is a no-op
        assert tree.expand(tree.root) == []

    def test_expand_forced_pass_creates_single_pass_child(self):
        b = Board(black=1 << 1, white=1 << 0, side_to_move=Player.BLACK)
        tree = SearchTree(b, seed=1)
        children = tree.expand(tree.root)
        assert len(children) == 1
        assert tree.nodes[children[0]].move == PASS
        assert tree.nodes[children[0]].board.side_to_move is Player.WHITE

    def test_expand_terminal_creates_nothing(self):
        tree = SearchTree(Board(black=1, white=0), seed=1)
        assert tree.expand(tree.root) == []

    def test_selection_prefers_first_unvisited(self):
        tree = SearchTree(start_board(), seed=1)
        children = tree.expand(tree.root)
        assert tree.select_leaf() == children[0]
        tree.backpropagate(children[0], Player.BLACK)
        assert tree.select_leaf() == children[1]

    def test_backpropagate_credits_each_mover(self):
        tree = SearchTree(start_board(), seed=1)
        child = tree.expand(tree.root)[0]
        tree.backpropagate(child, Player.BLACK)
        assert (tree.nodes[child].visits, tree.nodes[child].score) == (1, 1.0)
        assert (tree.root_node.visits, tree.root_node.score) == (1, 0.0)
        tree.backpropagate(child, None)
        assert tree.nodes[child].score == 1.5
        assert tree.root_node.score == 0.5

    def test_rollout_reaches_end(self):
        tree = SearchTree(start_board(), seed=3)
        result = tree.rollout(start_board())
        assert result in (Player.BLACK, Player.WHITE, None)

    def test_rollout_of_terminal_board(self):
        tree = SearchTree(start_board(), seed=3)
        assert tree.rollout(Board(black=0b11, white=0)) is Player.BLACK
        assert tree.rollout(Board(black=1, white=1 << 63)) is None


class TestSearch:
    def test_search_returns_legal_move_and_consistent_telemetry(self):
        tree = SearchTree(start_board(), exploration=1.41, seed=11)
        res = tree.search(25)
        assert isinstance(res.move, Place)
        assert res.move.square in legal_moves(start_board())
        t = res.telemetry
        assert len(t.visit_distribution) == 4
        assert sum(t.visit_distribution) == t.total_simulations
        assert t.total_simulations >= 25
        assert 0.0 <= t.chosen_q_value <= 1.0
        assert t.average_depth == 0.0
        assert t.node_count == len(tree)

    def test_greedy_pick_is_most_visited(self):
        tree = SearchTree(start_board(), seed=11)
        res = tree.search(25, temperature=0.0)
        root = tree.root_node
        visits = [tree.nodes[c].visits for c in root.children]
        best = root.children[visits.index(max(visits))]
        assert res.move == tree.nodes[best].move

    def test_seeded_searches_are_deterministic(self):
        a = SearchTree(start_board(), seed=7).search(30, temperature=1.0)
        b = SearchTree(start_board(), seed=7).search(30, temperature=1.0)
        assert a.move == b.move
        assert a.telemetry == b.telemetry
        assert a.telemetry.visit_distribution == b.telemetry.visit_distribution

    def test_telemetry_is_read_only_and_hashable(self):
        res = SearchTree(start_board(), seed=12).search(8)
        assert isinstance(res.telemetry.visit_distribution, tuple)
        assert hash(res.telemetry) == hash(SearchTree(start_board(), seed=12).search(8).telemetry)

    def test_terminal_root_short_circuits(self):
        tree = SearchTree(Board(black=1, white=0), seed=1)
        res = tree.search(50)
        assert res.move is None
        assert res.telemetry.total_simulations == 0
        assert len(tree) == 1

    def test_zero_budget_returns_first_legal_move(self):
        tree = SearchTree(start_board(), seed=1)
        res = tree.search(0)
        assert res.move == Place(legal_moves(start_board())[0])
        assert res.telemetry.total_simulations == 0
        assert res.telemetry.visit_distribution == (0, 0, 0, 0)

    def test_forced_pass_root_returns_pass(self):
        b = Board(black=1 << 1, white=1 << 0, side_to_move=Player.BLACK)
        tree = SearchTree(b, seed=1)
        res = tree.search(10)
        assert res.move == PASS
        # every iteration counts, even once only terminal leaves remain
        assert tree.root_node.visits == 10

    def test_temperature_sampling_follows_visits(self):
        tree = SearchTree(start_board(), seed=5)
        children = tree.expand(tree.root)
        for c, v in zip(children, (0, 7, 0, 0)):
            tree.nodes[c].visits = v
        for _ in range(20):
            assert tree.pick_child(1.0) == children[1]

    def test_low_temperature_does_not_overflow(self):
        tree = SearchTree(start_board(), seed=5)
        children = tree.expand(tree.root)
        for c, v in zip(children, (100, 500, 0, 0)):
            tree.nodes[c].visits = v
        picks = [tree.pick_child(0.005) for _ in range(200)]
        assert picks.count(children[1]) == 200

    def test_sampling_with_no_visits_falls_back_to_first(self):
        tree = SearchTree(start_board(), seed=5)
        children = tree.expand(tree.root)
        assert tree.pick_child(1.0) == children[0]

    def test_greedy_ties_go_to_first(self):
        tree = SearchTree(start_board(), seed=5)
        children = tree.expand(tree.root)
        for c, v in zip(children, (3, 7, 7, 1)):
            tree.nodes[c].visits = v
        assert tree.pick_child(0.0) == children[1]


class TestTreeReuse:
    def test_advance_root_keeps_subtree_statistics(self):
        tree = SearchTree(start_board(), seed=21)
        res = tree.search(30)
        chosen = next(c for c in tree.root_node.children if tree.nodes[c].move == res.move)
        before = subtree_stats(tree, chosen)

        assert tree.advance_root(res.move)
        after = subtree_stats(tree, tree.root)
        assert after == before
        assert len(tree) == len(before)
        assert tree.root_node.parent is None
        assert tree.root_node.move is None
        assert tree.root_board == apply(start_board(), res.move)

    def test_parent_links_valid_after_compaction(self):
        tree = SearchTree(start_board(), seed=22)
        res = tree.search(30)
        tree.advance_root(res.move)
        for idx, node in enumerate(tree.nodes):
            for c in node.children:
                assert tree.nodes[c].parent == idx

    def test_missing_move_leaves_tree_untouched(self):
        tree = SearchTree(start_board(), seed=23)
        tree.search(5)
        size = len(tree)
        assert not tree.advance_root(PASS)
        assert not tree.advance_root(Place(0))
        assert len(tree) == size
        assert tree.root_board == start_board()

    def test_search_continues_after_reuse(self):
        tree = SearchTree(start_board(), seed=24)
        res = tree.search(20)
        tree.advance_root(res.move)
        carried = tree.root_node.visits
        res2 = tree.search(10)
        assert res2.move is not None
        assert tree.root_node.visits >= carried + 10
