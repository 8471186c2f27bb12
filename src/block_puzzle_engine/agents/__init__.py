from .random_agent import play_random_game, run_random

__all__ = ["play_random_game", "run_random"]
