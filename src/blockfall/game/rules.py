from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_points: int = 100
    tetris_bonus: int = 400
    hard_drop_points: int = 2
    lines_per_level: int = 10
    base_drop_interval_ms: int = 1000
    drop_interval_step_ms: int = 100
    min_drop_interval_ms: int = 100

    def score_for_lines(self, lines: int, level: int) -> int:
        """Points for ``lines`` rows cleared at once, at the pre-clear ``level``."""
        if lines <= 0:
            return 0
        points = self.line_clear_points * level * lines
        if lines == 4:
            points += self.tetris_bonus * level
        return points

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def drop_interval_ms(self, level: int) -> int:
        interval = self.base_drop_interval_ms - (level - 1) * self.drop_interval_step_ms
        return max(self.min_drop_interval_ms, interval)
