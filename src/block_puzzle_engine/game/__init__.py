"""Game module for the 10x10 block puzzle.

Exports the engine and supporting classes:
- GameGrid: occupancy grid, placement checks and row/column clearing
- Piece, PieceCatalog: piece templates and weighted anti-repetition drawing
- ScoringRules, ScoreKeeper: quadratic line-clear scoring and best score
- BlockPuzzleEngine, GameSession: dealing, placing and game-over detection
"""

from .errors import CatalogError, ConfigurationError, ShapeError
from .grid import GameGrid, LineClear
from .pieces import (
    DEFAULT_PALETTE,
    DEFAULT_TEMPLATES,
    DEFAULT_WEIGHT_CLASSES,
    Piece,
    PieceCatalog,
    WeightClass,
    as_shape,
    copy_shape,
)
from .rules import ScoreKeeper, ScoringRules
from .core import (
    BlockPuzzleEngine,
    GameConfig,
    GameSession,
    PlacementOutcome,
    SessionStats,
    can_place_any,
)
from .display import format_grid, format_piece, print_grid, print_piece

__all__ = [
    "CatalogError",
    "ConfigurationError",
    "ShapeError",
    "GameGrid",
    "LineClear",
    "DEFAULT_PALETTE",
    "DEFAULT_TEMPLATES",
    "DEFAULT_WEIGHT_CLASSES",
    "Piece",
    "PieceCatalog",
    "WeightClass",
    "as_shape",
    "copy_shape",
    "ScoreKeeper",
    "ScoringRules",
    "BlockPuzzleEngine",
    "GameConfig",
    "GameSession",
    "PlacementOutcome",
    "SessionStats",
    "can_place_any",
    "format_grid",
    "format_piece",
    "print_grid",
    "print_piece",
]
