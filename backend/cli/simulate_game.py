#!/usr/bin/env python3
"""
CLI tool to run a snake game headlessly with the random autopilot.

Usage:
    python simulate_game.py
    python simulate_game.py --seed 42 --max-ticks 500
    python simulate_game.py --seed 7 --render-dir ./frames --print-board

Prints a JSON summary (ticks, score, length, death reason) when the game ends
or the tick limit is reached.
"""

import os
import sys
import json
import random
import argparse
import logging
from pathlib import Path
from typing import Dict, Any, Optional

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from domain.constants import GRID_SIZE, CELL_SIZE  # noqa: E402
from main import SnakeGame  # noqa: E402
from players import Player, RandomPlayer  # noqa: E402
from services.board_renderer import save_frame  # noqa: E402

logger = logging.getLogger(__name__)


def run_simulation(
    player: Player,
    max_ticks: int = 1000,
    grid_size: int = GRID_SIZE,
    seed: Optional[int] = None,
    render_dir: Optional[str] = None,
    cell_size: int = CELL_SIZE,
    print_board: bool = False
) -> Dict[str, Any]:
    """
    Play one game, asking the player for a direction before every tick.

    Returns a summary dict of the finished (or truncated) game.
    """
    game = SnakeGame(grid_size=grid_size, rng=random.Random(seed))
    game.start()

    frames_written = 0
    state = game.get_current_state()
    if render_dir:
        save_frame(state, Path(render_dir) / f"frame_{frames_written:05d}.png", cell_size)
        frames_written += 1

    while not state.game_over and state.tick_number < max_ticks:
        game.set_direction(player.get_move(state))
        state = game.tick()

        if print_board:
            print("\n" + state.print_board() + "\n")
        if render_dir:
            save_frame(state, Path(render_dir) / f"frame_{frames_written:05d}.png", cell_size)
            frames_written += 1

    if state.game_over:
        logger.info(f"Game ended after {state.tick_number} ticks: {state.death_reason}")
    else:
        logger.info(f"Stopped at tick limit {max_ticks}")

    return {
        "ticks": state.tick_number,
        "score": state.score,
        "length": len(state.snake),
        "game_over": state.game_over,
        "death_reason": state.death_reason,
        "frames_written": frames_written,
    }


def main(argv=None):
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(
        description="Run a headless snake game driven by the random autopilot."
    )
    parser.add_argument("--max-ticks", type=int, default=1000,
                        help="Stop after this many ticks if the snake is still alive")
    parser.add_argument("--grid-size", type=int, default=GRID_SIZE,
                        help="Width and height of the board")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for food placement and the autopilot")
    parser.add_argument("--render-dir", type=str, default=None,
                        help="Write one PNG per tick into this directory")
    parser.add_argument("--cell-size", type=int, default=CELL_SIZE,
                        help="Pixels per grid cell for rendered frames")
    parser.add_argument("--print-board", action="store_true",
                        help="Print the ASCII board after every tick")

    args = parser.parse_args(argv)

    if args.max_ticks <= 0:
        parser.error("--max-ticks must be positive")
    if args.grid_size < 6:
        parser.error("--grid-size must be at least 6 to fit the starting snake")

    player = RandomPlayer(rng=random.Random(args.seed))
    result = run_simulation(
        player,
        max_ticks=args.max_ticks,
        grid_size=args.grid_size,
        seed=args.seed,
        render_dir=args.render_dir,
        cell_size=args.cell_size,
        print_board=args.print_board
    )

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
