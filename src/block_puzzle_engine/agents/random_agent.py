from __future__ import annotations

import argparse
import logging
import random
from typing import Dict, List, Optional

from block_puzzle_engine.game import BlockPuzzleEngine, GameConfig, GameSession, print_grid


logger = logging.getLogger(__name__)


def play_random_game(engine: BlockPuzzleEngine, session: GameSession, rng: random.Random,
                     max_moves: int = 10000) -> Dict[str, float]:
    """Play uniformly random legal placements until the game ends."""
    moves = 0
    while not session.over and moves < max_moves:
        valid = engine.get_valid_actions(session)
        if not valid:
            break
        piece_id, row, col = rng.choice(valid)
        outcome = engine.try_place(session, piece_id, row, col)
        if not outcome.accepted:
            raise RuntimeError(f"engine rejected a listed action {(piece_id, row, col)}")
        moves += 1
    return session.get_game_stats()


def run_random(games: int = 1, seed: Optional[int] = None, show: bool = False) -> List[Dict[str, float]]:
    engine = BlockPuzzleEngine(GameConfig(random_seed=seed))
    rng = random.Random(seed)
    session = engine.new_session()
    results: List[Dict[str, float]] = []
    for game_idx in range(games):
        if game_idx > 0:
            engine.restart(session)
        stats = play_random_game(engine, session, rng)
        results.append(stats)
        print(
            f"game {game_idx + 1}/{games}  score={stats['final_score']}  "
            f"pieces={stats['pieces_placed']}  lines={stats['lines_cleared']}"
        )
        if show:
            print_grid(session.grid)
    print(f"High score: {engine.high_score}")
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play block puzzle games with a random agent")
    p.add_argument("--games", type=int, default=1)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--show", action="store_true", help="Print the final board of each game")
    p.add_argument("--log-level", type=str, default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.debug("Running %d random game(s) with seed %s", args.games, args.seed)
    run_random(games=args.games, seed=args.seed, show=args.show)


if __name__ == "__main__":  # pragma: no cover
    main()
