from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_base: int = 100

    def points_for(self, lines: int) -> int:
        """Quadratic bonus: k lines cleared by one placement are worth base * k * k."""
        if lines <= 0:
            return 0
        return lines * self.line_clear_base * lines


@dataclass
class ScoreKeeper:
    score: int = 0
    high_score: int = 0

    def apply_points(self, points: int) -> None:
        if points < 0:
            raise ValueError(f"points must be non-negative, got {points}")
        self.score += points
        self.high_score = max(self.high_score, self.score)

    def reset(self) -> None:
        self.score = 0
