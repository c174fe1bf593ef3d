"""Self-play CLI for seeded MCTS-vs-MCTS games"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Optional

import orjson

from ..logging_setup import level_from_name, setup_logging
from ..search.planner import MCTSConfig
from ..selfplay.runner import run_games
from ..settings import ConfigError, ensure_config, load_settings, resolve_path


def main(argv: Optional[list] = None) -> None:
    """Main entry point for othello-selfplay"""
    parser = argparse.ArgumentParser(description="Run seeded self-play games between two MCTS planners")

    parser.add_argument("--games", type=int, help="Number of games (default from config)")
    parser.add_argument("--workers", type=int, help="Worker processes (default from config)")
    parser.add_argument("--iterations", type=int, help="MCTS iterations per move")
    parser.add_argument("--temperature", type=float, help="Move sampling temperature")
    parser.add_argument("--first-seed", type=int, default=0, help="Seed of the first game")
    parser.add_argument("--config", help="Configuration file path")
    parser.add_argument("--output", help="Output file for game results (JSON)")

    args = parser.parse_args(argv)

    try:
        if args.config is None:
            ensure_config()
        settings = load_settings(resolve_path(args.config))
    except ConfigError as e:
        logging.getLogger(__name__).error("Error loading config: %s", e)
        sys.exit(1)
    setup_logging(overwrite=False, level=level_from_name(settings.logging.level), log_file=settings.logging.file)
    logger = logging.getLogger(__name__)

    games = args.games if args.games is not None else settings.selfplay.games
    workers = args.workers if args.workers is not None else settings.selfplay.workers
    output = args.output or settings.selfplay.output
    base = settings.mcts
    config = MCTSConfig(
        iterations=args.iterations if args.iterations is not None else base.iterations,
        exploration=base.exploration,
        temperature=args.temperature if args.temperature is not None else base.temperature,
    )

    try:
        results = run_games(games, workers, config, first_seed=args.first_seed)
    except KeyboardInterrupt:
        logger.info("Self-play interrupted by user")
        sys.exit(1)

    tally = {"black": 0, "white": 0, "draw": 0}
    for i, (result, record, (b, w)) in enumerate(results):
        key = "black" if result > 0 else ("white" if result < 0 else "draw")
        tally[key] += 1
        logger.info("game %d: %s %d-%d %s", args.first_seed + i, key, b, w, record)
    logger.info("Results: Black %d, White %d, Draw %d", tally["black"], tally["white"], tally["draw"])

    if output:
        output_data = {
            "timestamp": datetime.now().isoformat(),
            "config": {
                "games": games,
                "workers": workers,
                "iterations": config.iterations,
                "exploration": config.exploration,
                "temperature": config.temperature,
                "first_seed": args.first_seed,
            },
            "games": [
                {"seed": args.first_seed + i, "result": r, "record": rec, "black": b, "white": w}
                for i, (r, rec, (b, w)) in enumerate(results)
            ],
            "tally": tally,
        }
        with open(output, "wb") as f:
            f.write(orjson.dumps(output_data, option=orjson.OPT_INDENT_2))
        logger.info("Results saved to %s", output)


if __name__ == "__main__":
    main()
