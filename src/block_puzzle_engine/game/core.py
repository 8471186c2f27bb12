from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import ConfigurationError
from .grid import CellIndex, GameGrid
from .pieces import Piece, PieceCatalog
from .rules import ScoreKeeper, ScoringRules


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    grid_size: int = 10
    pieces_per_set: int = 3
    history_size: int = 5
    random_seed: Optional[int] = None
    refill_when_empty: bool = True
    preview_size: int = 5

    def validate(self) -> None:
        for name in ("grid_size", "pieces_per_set", "history_size", "preview_size"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")


@dataclass
class SessionStats:
    pieces_placed: int = 0
    lines_cleared: int = 0
    offers_dealt: int = 0


@dataclass
class GameSession:
    grid: GameGrid
    scores: ScoreKeeper
    offer: List[Piece] = field(default_factory=list)
    over: bool = False
    stats: SessionStats = field(default_factory=SessionStats)

    @property
    def score(self) -> int:
        return self.scores.score

    @property
    def high_score(self) -> int:
        return self.scores.high_score

    def find_piece(self, piece_id: int) -> Optional[Piece]:
        for piece in self.offer:
            if piece.id == piece_id:
                return piece
        return None

    def get_state(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.snapshot(),
            "pieces": [
                {"id": p.id, "shape": p.shape.copy(), "color": p.color, "size_class": p.size_class}
                for p in self.offer
            ],
            "pieces_remaining": len(self.offer),
            "score": self.score,
            "high_score": self.high_score,
            "game_over": self.over,
            "filled_ratio": self.grid.get_filled_ratio(),
        }

    def get_game_stats(self) -> Dict[str, Any]:
        return {
            "final_score": self.score,
            "high_score": self.high_score,
            "pieces_placed": self.stats.pieces_placed,
            "lines_cleared": self.stats.lines_cleared,
            "offers_dealt": self.stats.offers_dealt,
            "final_fill_ratio": self.grid.get_filled_ratio(),
            "avg_score_per_piece": self.score / max(1, self.stats.pieces_placed),
        }


@dataclass
class PlacementOutcome:
    accepted: bool
    cleared_cells: Tuple[CellIndex, ...] = ()
    lines_cleared: int = 0
    points_awarded: int = 0
    game_over: bool = False


def can_place_any(pieces: Iterable[Piece], grid: GameGrid) -> bool:
    """True if at least one piece fits somewhere on the grid.

    Exhaustive over every origin on the board; an empty offer never fits.
    """
    for piece in pieces:
        if grid.has_placement(piece.shape):
            return True
    return False


class BlockPuzzleEngine:
    """Deals pieces and applies placements to caller-owned sessions."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[PieceCatalog] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.config.validate()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        if catalog is None:
            catalog = PieceCatalog(history_size=self.config.history_size, rng=self.rng)
        self.catalog = catalog
        self.high_score = 0

    def new_session(self) -> GameSession:
        session = GameSession(
            grid=GameGrid(self.config.grid_size),
            scores=ScoreKeeper(high_score=self.high_score),
        )
        self.offer_pieces(session)
        return session

    def offer_pieces(self, session: GameSession, n: Optional[int] = None) -> List[Piece]:
        """Replace the session's offer with `n` freshly drawn pieces."""
        count = self.config.pieces_per_set if n is None else n
        offer: List[Piece] = []
        for piece_id in range(count):
            offer.append(self.catalog.draw_piece(piece_id, taken_colors=[p.color for p in offer]))
        session.offer = offer
        session.stats.offers_dealt += 1
        logger.debug("Dealt offer %s", [(p.id, p.template_index, p.color) for p in offer])
        self._update_over(session)
        return offer

    def try_place(self, session: GameSession, piece_id: int, row: int, col: int) -> PlacementOutcome:
        if session.over:
            return PlacementOutcome(accepted=False, game_over=True)
        piece = session.find_piece(piece_id)
        if piece is None:
            logger.debug("Rejected placement: no piece with id %s", piece_id)
            return PlacementOutcome(accepted=False)
        if not session.grid.place(row, col, piece.shape, piece.color):
            logger.debug("Rejected placement of piece %s at (%s, %s)", piece_id, row, col)
            return PlacementOutcome(accepted=False)

        cleared = session.grid.clear_lines()
        points = 0
        if cleared.lines_cleared > 0:
            points = self.rules.points_for(cleared.lines_cleared)
            session.scores.apply_points(points)
            self.high_score = max(self.high_score, session.scores.high_score)
            logger.debug(
                "Cleared rows %s cols %s for %d points", cleared.rows, cleared.cols, points
            )

        session.offer = [p for p in session.offer if p is not piece]
        session.stats.pieces_placed += 1
        session.stats.lines_cleared += cleared.lines_cleared

        if session.offer:
            self._update_over(session)
        elif self.config.refill_when_empty:
            self.offer_pieces(session)
        # An emptied offer without refill waits for the caller to deal again

        return PlacementOutcome(
            accepted=True,
            cleared_cells=cleared.cleared_cells,
            lines_cleared=cleared.lines_cleared,
            points_awarded=points,
            game_over=session.over,
        )

    def is_over(self, session: GameSession) -> bool:
        return not can_place_any(session.offer, session.grid)

    def restart(self, session: GameSession) -> None:
        session.grid.reset()
        session.scores.reset()
        session.scores.high_score = max(session.scores.high_score, self.high_score)
        session.over = False
        session.stats = SessionStats()
        self.offer_pieces(session)

    def get_valid_actions(self, session: GameSession) -> List[Tuple[int, int, int]]:
        """List of (piece_id, row, col) placements accepted by `try_place`."""
        if session.over:
            return []
        actions: List[Tuple[int, int, int]] = []
        for piece in session.offer:
            for row, col in session.grid.valid_placements(piece.shape):
                actions.append((piece.id, row, col))
        return actions

    def _update_over(self, session: GameSession) -> None:
        session.over = self.is_over(session)
        if session.over:
            logger.info(
                "Game over: score %d, %d pieces placed", session.score, session.stats.pieces_placed
            )
