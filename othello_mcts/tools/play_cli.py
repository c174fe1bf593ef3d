"""Interactive terminal game: human or MCTS on either side"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional

from ..engine.board import Board, apply, must_pass, render, score, winner
from ..engine.errors import OthelloError
from ..engine.moves import PASS, Move, Place, Player
from ..engine.notation import coord_to_square, move_to_notation
from ..logging_setup import level_from_name, log_event, setup_logging
from ..search.planner import MCTSConfig, Planner, preset
from ..search.tree import SearchResult
from ..search.telemetry import Telemetry
from ..selfplay.runner import play_game
from ..settings import ConfigError, ensure_config, load_settings, resolve_path

log = logging.getLogger(__name__)


class HumanAgent:
    """Reads moves from a prompt until a legal one is entered."""

    def __init__(self, read: Callable[[str], str] = input, write: Callable[[str], None] = print) -> None:
        self.read = read
        self.write = write

    def select_move(self, board: Board) -> SearchResult:
        self.write(render(board, show_moves=True))
        if must_pass(board):
            self.write(f"{board.side_to_move} has no legal move and must pass.")
            return SearchResult(PASS, Telemetry())
        while True:
            text = self.read(f"{board.side_to_move} to move (e.g. D3): ").strip()
            try:
                sq = coord_to_square(text)
                move = Place(sq)
                apply(board, move)
            except OthelloError as e:
                self.write(str(e))
                continue
            return SearchResult(move, Telemetry())


class ReportingPlanner(Planner):
    def __init__(self, config: MCTSConfig, write: Callable[[str], None] = print) -> None:
        super().__init__(config)
        self.write = write

    def select_move(self, board: Board) -> SearchResult:
        res = super().select_move(board)
        t = res.telemetry
        if res.move is not None:
            self.write(
                f"{board.side_to_move} (AI) plays {move_to_notation(res.move)} "
                f"[sims={t.total_simulations} q={t.chosen_q_value:.2f}]"
            )
        log_event("play", "ai_move", move=str(res.move), sims=t.total_simulations, q=t.chosen_q_value)
        return res


def _build_config(args: argparse.Namespace, base: MCTSConfig) -> MCTSConfig:
    cfg = preset(args.preset) if args.preset else base
    return MCTSConfig(
        iterations=args.iterations if args.iterations is not None else cfg.iterations,
        exploration=args.exploration if args.exploration is not None else cfg.exploration,
        temperature=args.temperature if args.temperature is not None else cfg.temperature,
        seed=args.seed if args.seed is not None else cfg.seed,
    )


def main(argv: Optional[list] = None) -> None:
    p = argparse.ArgumentParser(prog="othello-play", description="Play Othello in the terminal")
    p.add_argument("--black", choices=["human", "ai"], default="human")
    p.add_argument("--white", choices=["human", "ai"], default="ai")
    p.add_argument("--preset", choices=["fast", "standard", "strong"], default=None)
    p.add_argument("--iterations", type=int, default=None)
    p.add_argument("--exploration", type=float, default=None)
    p.add_argument("--temperature", type=float, default=None)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--config", default=None, help="Configuration file path")
    args = p.parse_args(argv)

    try:
        if args.config is None:
            ensure_config()
        settings = load_settings(resolve_path(args.config))
    except ConfigError as e:
        logging.getLogger(__name__).error("Error loading config: %s", e)
        sys.exit(1)
    setup_logging(overwrite=True, level=level_from_name(settings.logging.level), log_file=settings.logging.file)

    cfg = _build_config(args, settings.mcts)
    agents = {
        Player.BLACK: HumanAgent() if args.black == "human" else ReportingPlanner(cfg),
        Player.WHITE: HumanAgent() if args.white == "human" else ReportingPlanner(cfg),
    }

    def on_move(board: Board, move: Move) -> None:
        log.info("%s plays %s", board.side_to_move, move_to_notation(move))

    try:
        rec = play_game(agents[Player.BLACK], agents[Player.WHITE], on_move=on_move)
    except (KeyboardInterrupt, EOFError):
        print("\nGame abandoned.")
        sys.exit(1)

    final = rec.final
    print(render(final))
    b, w = score(final)
    win = winner(final)
    print(f"Final score: Black {b} - White {w}. " + (f"{win} wins." if win else "Draw."))
    print(f"Record: {rec.notation}")


if __name__ == "__main__":
    main()
