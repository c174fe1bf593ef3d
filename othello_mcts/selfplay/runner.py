from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from multiprocessing import Pool
from typing import Callable, List, Optional, Protocol, Tuple

from ..engine.board import Board, apply, is_terminal, legal_moves, score, start_board, winner
from ..engine.moves import PASS, Move, Place, Player
from ..engine.notation import moves_to_string
from ..logging_setup import log_event
from ..search.planner import MCTSConfig, Planner
from ..search.telemetry import Telemetry
from ..search.tree import SearchResult

log = logging.getLogger(__name__)

MAX_PLIES = 200


class Agent(Protocol):
    def select_move(self, board: Board) -> SearchResult: ...


class RandomAgent:
    """Plays a uniformly random legal move."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def select_move(self, board: Board) -> SearchResult:
        moves = legal_moves(board)
        if not moves:
            return SearchResult(PASS, Telemetry())
        return SearchResult(Place(self.rng.choice(moves)), Telemetry())


@dataclass
class GameRecord:
    moves: List[Move] = field(default_factory=list)
    final: Optional[Board] = None

    @property
    def notation(self) -> str:
        return moves_to_string(self.moves)

    @property
    def score(self) -> Tuple[int, int]:
        return score(self.final) if self.final is not None else (0, 0)

    @property
    def winner(self) -> Optional[Player]:
        return winner(self.final) if self.final is not None else None

    @property
    def result(self) -> int:
        """+1 Black won, -1 White won, 0 draw (Black's point of view)."""
        w = self.winner
        if w is None:
            return 0
        return 1 if w is Player.BLACK else -1


def play_game(
    black: Agent,
    white: Agent,
    board: Optional[Board] = None,
    on_move: Optional[Callable[[Board, Move], None]] = None,
) -> GameRecord:
    """Play a full game between two players, telling both about every move."""
    b = start_board() if board is None else board
    rec = GameRecord()
    players = {Player.BLACK: black, Player.WHITE: white}
    while not is_terminal(b):
        res = players[b.side_to_move].select_move(b)
        move = res.move if res.move is not None else PASS
        if on_move is not None:
            on_move(b, move)
        b = apply(b, move)
        rec.moves.append(move)
        for p in players.values():
            notify = getattr(p, "notify_move", None)
            if notify is not None:
                notify(move)
        if len(rec.moves) > MAX_PLIES:
            raise RuntimeError("game exceeded the maximum number of plies")
    rec.final = b
    return rec


def _play_one_entry(args_tuple):
    return play_one(*args_tuple)


def play_one(seed: int, config: MCTSConfig) -> Tuple[int, str, Tuple[int, int]]:
    """Planner vs planner with seeds derived from `seed`. Returns (result, record, score)."""
    black = Planner(MCTSConfig(config.iterations, config.exploration, config.temperature, seed * 2))
    white = Planner(MCTSConfig(config.iterations, config.exploration, config.temperature, seed * 2 + 1))
    rec = play_game(black, white)
    log_event(
        "selfplay",
        "game_over",
        seed=seed,
        result=rec.result,
        black=rec.score[0],
        white=rec.score[1],
        plies=len(rec.moves),
        reuses=black.reuses + white.reuses,
    )
    return rec.result, rec.notation, rec.score


def run_games(games: int, workers: int, config: MCTSConfig, first_seed: int = 0) -> List[Tuple[int, str, Tuple[int, int]]]:
    seeds = list(range(first_seed, first_seed + games))
    log.info("Playing %d games on %d worker(s), %d iterations per move", games, workers, config.iterations)
    if workers <= 1:
        return [play_one(s, config) for s in seeds]
    with Pool(processes=workers) as pool:
        return pool.map(_play_one_entry, [(s, config) for s in seeds])
