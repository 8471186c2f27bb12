from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (piece, row, col) -> Discrete(N).

    Also exposes `get_action_mask()` returning a 1D boolean mask of shape (N,).
    Order: piece, row, col (C-order flattening).
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        k, rows, cols = map(int, env.action_space.nvec)
        self.k = k
        self.rows = rows
        self.cols = cols
        self.n = int(k * rows * cols)
        self.action_space = spaces.Discrete(self.n)

    def _unflatten(self, idx: int) -> tuple[int, int, int]:
        col = idx % self.cols
        idx //= self.cols
        row = idx % self.rows
        piece = idx // self.rows
        return int(piece), int(row), int(col)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        return self.env.unwrapped.get_action_mask().reshape(-1)


class ResampleInvalidActionWrapper(gym.Wrapper):
    """Swaps a masked-out action for a uniformly drawn legal one.

    Wraps a `FlattenDiscreteActionWrapper`, whose flat mask indexes the
    Discrete action space directly. When no action is legal the original
    action is forwarded and the env reports it as invalid.
    """

    def __init__(self, env: FlattenDiscreteActionWrapper):
        super().__init__(env)
        assert isinstance(env, FlattenDiscreteActionWrapper), "expects flattened actions"
        self._flat_env = env

    def step(self, action):  # type: ignore[override]
        mask = self.get_action_mask()
        idx = int(action)
        if not (0 <= idx < mask.shape[0] and mask[idx]):
            legal = np.flatnonzero(mask)
            if legal.size > 0:
                idx = int(self.np_random.choice(legal))
        return self.env.step(idx)

    def get_action_mask(self) -> np.ndarray:
        return self._flat_env.get_action_mask()
