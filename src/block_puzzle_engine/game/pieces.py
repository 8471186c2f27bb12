from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import CatalogError, ShapeError


Shape = np.ndarray


def as_shape(rows: Sequence[Sequence[int]] | np.ndarray) -> Shape:
    """Build an independent 0/1 shape array from an ordered sequence of rows.

    Ragged rows are right-padded with empty cells up to the longest row.
    """
    if isinstance(rows, np.ndarray):
        if rows.ndim != 2:
            raise ShapeError(f"shape must be 2-D, got {rows.ndim}-D")
        rows = rows.tolist()
    rows = [list(row) for row in rows]
    if len(rows) == 0:
        raise ShapeError("shape has no rows")
    width = max(len(row) for row in rows)
    if width == 0:
        raise ShapeError("shape has no columns")

    shape = np.zeros((len(rows), width), dtype=np.int8)
    for i, row in enumerate(rows):
        for j, cell in enumerate(row):
            if cell not in (0, 1):
                raise ShapeError(f"shape cell ({i}, {j}) must be 0 or 1, got {cell!r}")
            shape[i, j] = cell
    if not shape.any():
        raise ShapeError("shape has no filled cells")
    return shape


def copy_shape(shape: Shape) -> Shape:
    return np.array(shape, dtype=np.int8, copy=True)


DEFAULT_TEMPLATES: Tuple[Tuple[Tuple[int, ...], ...], ...] = (
    # small
    ((1,),),
    ((1, 1),),
    ((1,), (1,)),
    # medium
    ((1, 1), (1, 1)),
    ((1, 1, 1),),
    ((1,), (1,), (1,)),
    ((1, 1, 1), (0, 1, 0)),
    ((1, 1), (0, 1), (0, 1)),
    ((1, 1), (1, 0), (1, 0)),
    ((1, 1, 0), (0, 1, 1)),
    ((0, 1, 1), (1, 1, 0)),
    # large
    ((1, 1, 1, 1),),
    ((1,), (1,), (1,), (1,)),
    ((1, 1, 1), (1, 0, 0), (1, 0, 0)),
    ((1, 1, 1), (0, 0, 1), (0, 0, 1)),
    ((1, 0, 0), (1, 1, 1), (1, 0, 0)),
    ((0, 1, 0), (1, 1, 1), (0, 1, 0)),
    ((1, 1, 1, 1), (1, 0, 0, 0)),
    ((1, 1), (1, 1), (1, 1)),
)


@dataclass(frozen=True)
class WeightClass:
    """Group of template indices drawn together with a relative weight."""
    name: str
    indices: Tuple[int, ...]
    weight: int


DEFAULT_WEIGHT_CLASSES: Tuple[WeightClass, ...] = (
    WeightClass("small", (0, 1, 2), 15),
    WeightClass("medium", (3, 4, 5, 6, 7, 8, 9, 10), 10),
    WeightClass("large", (11, 12, 13, 14, 15, 16, 17, 18), 5),
)

DEFAULT_PALETTE: Tuple[str, ...] = (
    "#4169E1",
    "#50C878",
    "#FF4500",
    "#9370DB",
    "#FFD700",
    "#87CEEB",
    "#FF69B4",
    "#32CD32",
    "#FF7F50",
)


@dataclass(eq=False)
class Piece:
    """A shape offered to the player."""
    shape: Shape
    color: str
    id: int
    template_index: int = -1
    size_class: str = ""

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self.shape))


class PieceCatalog:
    """Weighted, anti-repetition source of pieces.

    A draw picks a weight class proportionally to its weight, then a template
    uniformly among the class members that are not in the recent history. If
    the history covers the whole class the full class is used instead.
    """

    def __init__(
        self,
        templates: Iterable[Sequence[Sequence[int]]] = DEFAULT_TEMPLATES,
        weight_classes: Iterable[WeightClass] = DEFAULT_WEIGHT_CLASSES,
        palette: Iterable[str] = DEFAULT_PALETTE,
        history_size: int = 5,
        rng: Optional[random.Random] = None,
    ) -> None:
        templates = list(templates)
        if not templates:
            raise CatalogError("piece catalog needs at least one template")
        try:
            self.templates: List[Shape] = [as_shape(t) for t in templates]
        except ShapeError as exc:
            raise CatalogError(f"invalid template: {exc}") from exc

        self.weight_classes: Tuple[WeightClass, ...] = tuple(weight_classes)
        if not self.weight_classes:
            raise CatalogError("piece catalog needs at least one weight class")
        for wc in self.weight_classes:
            if not wc.indices:
                raise CatalogError(f"weight class {wc.name!r} is empty")
            if wc.weight <= 0:
                raise CatalogError(f"weight class {wc.name!r} must have a positive weight")
            for idx in wc.indices:
                if not 0 <= idx < len(self.templates):
                    raise CatalogError(f"weight class {wc.name!r} refers to unknown template {idx}")

        self.palette: Tuple[str, ...] = tuple(palette)
        if not self.palette:
            raise CatalogError("piece catalog needs at least one color")
        if history_size <= 0:
            raise CatalogError("history_size must be positive")

        self.total_weight = sum(wc.weight for wc in self.weight_classes)
        self.history: Deque[int] = deque(maxlen=history_size)
        self.rng = rng or random.Random()
        self._class_of = {idx: wc.name for wc in self.weight_classes for idx in wc.indices}

    def _pick_class(self) -> WeightClass:
        u = self.rng.random() * self.total_weight
        for wc in self.weight_classes:
            if u < wc.weight:
                return wc
            u -= wc.weight
        # Only reachable through float rounding at the upper edge
        return self.weight_classes[-1]

    def draw_template_index(self) -> int:
        wc = self._pick_class()
        candidates = [idx for idx in wc.indices if idx not in self.history]
        if not candidates:
            candidates = list(wc.indices)
        index = self.rng.choice(candidates)
        self.history.append(index)
        return index

    def draw_color(self, taken: Iterable[str] = ()) -> str:
        taken = set(taken)
        available = [c for c in self.palette if c not in taken]
        if not available:
            available = list(self.palette)
        return self.rng.choice(available)

    def draw_piece(self, piece_id: int, taken_colors: Iterable[str] = ()) -> Piece:
        index = self.draw_template_index()
        return Piece(
            shape=copy_shape(self.templates[index]),
            color=self.draw_color(taken_colors),
            id=piece_id,
            template_index=index,
            size_class=self.size_class_of(index),
        )

    def size_class_of(self, template_index: int) -> str:
        return self._class_of.get(template_index, "")

    def reset_history(self) -> None:
        self.history.clear()
