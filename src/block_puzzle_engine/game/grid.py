from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .pieces import Shape


CellIndex = int


@dataclass
class LineClear:
    cleared_cells: Tuple[CellIndex, ...] = ()
    lines_cleared: int = 0
    rows: Tuple[int, ...] = field(default_factory=tuple)
    cols: Tuple[int, ...] = field(default_factory=tuple)


class GameGrid:
    """Square occupancy grid with placement and row/column clearing.

    `cells` holds True for filled cells; `colors` holds the color that filled
    each cell (None when empty) and is not consulted for legality.
    """

    def __init__(self, size: int = 10) -> None:
        self.size = int(size)
        self.cells = np.zeros((self.size, self.size), dtype=np.bool_)
        self.colors = np.full((self.size, self.size), None, dtype=object)

    def reset(self) -> None:
        self.cells.fill(False)
        self.colors.fill(None)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def is_empty(self, row: int, col: int) -> bool:
        """Whether (row, col) can receive a block; False off the board."""
        return self.is_inside(row, col) and not self.cells[row, col]

    def color_at(self, row: int, col: int) -> Optional[str]:
        if not self.is_inside(row, col):
            return None
        return self.colors[row, col]

    def cell_index(self, row: int, col: int) -> CellIndex:
        return row * self.size + col

    def can_place(self, row: int, col: int, shape: Shape) -> bool:
        offsets = np.argwhere(shape)
        if offsets.size == 0:
            return False
        # Bounding box of the filled cells; rejects most off-board origins early
        # Python ints so huge caller coordinates compare instead of overflowing int64
        top, left = (int(v) for v in offsets.min(axis=0))
        bottom, right = (int(v) for v in offsets.max(axis=0))
        row, col = int(row), int(col)
        if row + top < 0 or col + left < 0:
            return False
        if row + bottom >= self.size or col + right >= self.size:
            return False
        for i, j in offsets:
            if self.cells[row + int(i), col + int(j)]:
                return False
        return True

    def place(self, row: int, col: int, shape: Shape, color: Optional[str] = None) -> bool:
        if not self.can_place(row, col, shape):
            return False
        for i, j in np.argwhere(shape):
            self.cells[row + i, col + j] = True
            self.colors[row + i, col + j] = color
        return True

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.flatnonzero(self.cells.all(axis=1))]

    def full_cols(self) -> List[int]:
        return [int(c) for c in np.flatnonzero(self.cells.all(axis=0))]

    def clear_lines(self) -> LineClear:
        """Clear every full row and column.

        Both scans read the same state, so a row and a column that cross are
        both counted while their shared cell is cleared once.
        """
        rows = self.full_rows()
        cols = self.full_cols()
        if not rows and not cols:
            return LineClear()

        to_clear = np.zeros_like(self.cells)
        to_clear[rows, :] = True
        to_clear[:, cols] = True
        cleared = tuple(int(i) for i in np.flatnonzero(to_clear))

        self.cells[to_clear] = False
        self.colors[to_clear] = None
        return LineClear(
            cleared_cells=cleared,
            lines_cleared=len(rows) + len(cols),
            rows=tuple(rows),
            cols=tuple(cols),
        )

    def placement_mask(self, shape: Shape) -> np.ndarray:
        """Boolean (size, size) array, True where `shape` fits with that origin.

        Same answer as calling `can_place` for every origin on the board.
        """
        mask = np.zeros((self.size, self.size), dtype=np.bool_)
        offsets = np.argwhere(shape)
        if offsets.size == 0:
            return mask
        top, left = offsets.min(axis=0)
        bottom, right = offsets.max(axis=0)
        box = np.asarray(shape[top : bottom + 1, left : right + 1], dtype=np.bool_)
        box_h, box_w = box.shape
        if box_h > self.size or box_w > self.size:
            return mask
        windows = sliding_window_view(self.cells, (box_h, box_w))
        fits = ~np.any(windows & box, axis=(2, 3))
        # Window (r, c) is the filled-cell box origin; shift back to the shape origin
        rows = np.arange(fits.shape[0]) - top
        cols = np.arange(fits.shape[1]) - left
        valid_r = (rows >= 0) & (rows < self.size)
        valid_c = (cols >= 0) & (cols < self.size)
        sub = fits[np.ix_(valid_r, valid_c)]
        mask[np.ix_(rows[valid_r], cols[valid_c])] = sub
        return mask

    def valid_placements(self, shape: Shape) -> List[Tuple[int, int]]:
        """All (row, col) origins where `shape` can be placed, row-major."""
        return [(int(r), int(c)) for r, c in np.argwhere(self.placement_mask(shape))]

    def has_placement(self, shape: Shape) -> bool:
        return bool(self.placement_mask(shape).any())

    @property
    def filled_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def get_filled_ratio(self) -> float:
        return self.filled_count / float(self.size * self.size)

    def snapshot(self) -> np.ndarray:
        return self.cells.astype(np.int8)

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.size)
        new_grid.cells = self.cells.copy()
        new_grid.colors = self.colors.copy()
        return new_grid
