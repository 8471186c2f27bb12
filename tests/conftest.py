from __future__ import annotations

import numpy as np
import pytest

from block_puzzle_engine.game import BlockPuzzleEngine, GameConfig, GameGrid, Piece, as_shape


def make_piece(rows, piece_id: int = 0, color: str = "#4169E1") -> Piece:
    return Piece(shape=as_shape(rows), color=color, id=piece_id)


def brute_can_place(cells: np.ndarray, row: int, col: int, shape: np.ndarray) -> bool:
    size = cells.shape[0]
    for i in range(shape.shape[0]):
        for j in range(shape.shape[1]):
            if not shape[i, j]:
                continue
            r, c = row + i, col + j
            if not (0 <= r < size and 0 <= c < size):
                return False
            if cells[r, c]:
                return False
    return True


@pytest.fixture
def grid() -> GameGrid:
    return GameGrid(10)


@pytest.fixture
def engine() -> BlockPuzzleEngine:
    return BlockPuzzleEngine(GameConfig(random_seed=1234))


@pytest.fixture
def session(engine):
    return engine.new_session()
