from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_puzzle_engine.game import BlockPuzzleEngine, GameConfig, GameSession, format_grid


def _compute_action_mask(engine: BlockPuzzleEngine, session: GameSession) -> np.ndarray:
    size = engine.config.grid_size
    k = engine.config.pieces_per_set
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for piece_id, row, col in engine.get_valid_actions(session):
        if 0 <= piece_id < k:
            mask[piece_id, row, col] = True
    return mask


class BlockPuzzleEnv(gym.Env):
    """Placement environment: one step places one offered piece.

    Action is (piece_id, row, col). Reward is the engine's points for the
    placement plus `cell_reward` per placed cell; rejected actions receive
    `invalid_action_penalty` and leave the game unchanged.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 invalid_action_penalty: float = -0.1,
                 cell_reward: float = 1.0,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.engine = BlockPuzzleEngine(config)
        self.session = self.engine.new_session()
        self.render_mode = render_mode

        self.invalid_action_penalty = float(invalid_action_penalty)
        self.cell_reward = float(cell_reward)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        size = self.engine.config.grid_size
        k = self.engine.config.pieces_per_set
        p = self.engine.config.preview_size

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=0, high=1, shape=(k, p, p), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, size, size))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.engine.config.pieces_per_set
        p = self.engine.config.preview_size
        pieces = np.zeros((k, p, p), dtype=np.int8)
        for piece in self.session.offer:
            if 0 <= piece.id < k:
                h = min(piece.height, p)
                w = min(piece.width, p)
                pieces[piece.id, :h, :w] = piece.shape[:h, :w]
        return {
            "grid": self.session.grid.snapshot(),
            "pieces": pieces,
            "pieces_remaining": len(self.session.offer),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.engine, self.session),
            "score": self.session.score,
            "high_score": self.session.high_score,
            "lines_cleared": self.session.stats.lines_cleared,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng.seed(seed)
            self.engine.catalog.reset_history()
        self.engine.restart(self.session)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        piece_id, row, col = map(int, action)

        piece = self.session.find_piece(piece_id)
        cells = piece.cell_count if piece is not None else 0
        outcome = self.engine.try_place(self.session, piece_id, row, col)

        reward_components: Dict[str, float] = {}
        if outcome.accepted:
            reward_components["cells"] = self.cell_reward * float(cells)
            reward_components["points"] = float(outcome.points_awarded)
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        terminated = bool(self.session.over)
        if terminated:
            reward_components["terminal"] = self.terminal_penalty
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps

        info = self._get_info()
        info["reward_components"] = reward_components
        info["lines_cleared_step"] = outcome.lines_cleared
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.engine, self.session)

    def render(self) -> Optional[str]:
        if self.render_mode == "ansi":
            return f"score {self.session.score}\n{format_grid(self.session.grid)}"
        return None

    def close(self) -> None:
        pass
