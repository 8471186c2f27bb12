from __future__ import annotations

import numpy as np

from .grid import GameGrid


FILLED = "█"
EMPTY = "·"


def _format_rows(cells: np.ndarray) -> str:
    return "\n".join("".join(FILLED if cell else EMPTY for cell in row) for row in cells)


def format_grid(grid: GameGrid | np.ndarray) -> str:
    cells = grid.cells if isinstance(grid, GameGrid) else grid
    return _format_rows(cells)


def format_piece(piece_shape: np.ndarray) -> str:
    return _format_rows(piece_shape)


def print_grid(grid: GameGrid | np.ndarray) -> None:
    print(format_grid(grid))


def print_piece(piece_shape: np.ndarray) -> None:
    print(format_piece(piece_shape))
