"""Gymnasium environment for the block puzzle engine."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .block_puzzle_env import BlockPuzzleEnv
from .wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper

register(
    id="BlockPuzzle-10x10-v0",
    entry_point="block_puzzle_engine.env.block_puzzle_env:BlockPuzzleEnv",
)

__all__ = [
    "BlockPuzzleEnv",
    "FlattenDiscreteActionWrapper",
    "ResampleInvalidActionWrapper",
]
