"""Block puzzle (10x10) game-state engine."""

from .game import (
    BlockPuzzleEngine,
    GameConfig,
    GameGrid,
    GameSession,
    Piece,
    PieceCatalog,
    PlacementOutcome,
    ScoringRules,
    can_place_any,
)

__all__ = [
    "BlockPuzzleEngine",
    "GameConfig",
    "GameGrid",
    "GameSession",
    "Piece",
    "PieceCatalog",
    "PlacementOutcome",
    "ScoringRules",
    "can_place_any",
]
