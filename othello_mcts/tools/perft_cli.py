from __future__ import annotations

import argparse
import logging
import sys
from time import perf_counter
from typing import Optional

from ..engine.board import start_board
from ..engine.errors import OthelloError
from ..engine.perft import perft, play_moves
from ..logging_setup import setup_logging

log = logging.getLogger(__name__)


def main(argv: Optional[list] = None) -> None:
    p = argparse.ArgumentParser(prog="othello-perft")
    p.add_argument("--depth", type=int, required=True)
    p.add_argument("--position", type=str, default=None, help="move record like d3c4f5, '--' for a pass")
    args = p.parse_args(argv)
    setup_logging(overwrite=False, log_file=False)

    b = start_board()
    if args.position:
        moves = [args.position[i : i + 2] for i in range(0, len(args.position), 2)]
        try:
            b = play_moves(b, moves)
        except OthelloError as e:
            log.error("bad --position: %s", e)
            sys.exit(1)
    t0 = perf_counter()
    n = perft(b, args.depth)
    dt = perf_counter() - t0
    log.info("perft(d=%d)=%d in %.3fs", args.depth, n, dt)


if __name__ == "__main__":
    main()
