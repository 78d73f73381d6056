from __future__ import annotations

from typing import Iterable, List, Tuple

import numpy as np

from .pieces import Shape

Coordinate = Tuple[int, int]


class GameGrid:
    """Discrete 2D grid of locked cells.

    The grid uses 0 for empty cells and ``TetrominoType`` values for filled
    cells; the value only matters for coloring. Row 0 is the top. Rows above
    the grid (negative y) are treated as empty so pieces can spawn partially
    hidden.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def collides(self, shape: Shape, x: int, y: int) -> bool:
        ys, xs = np.nonzero(shape)
        for dy, dx in zip(ys, xs):
            bx = x + int(dx)
            by = y + int(dy)
            if bx < 0 or bx >= self.width or by >= self.height:
                return True
            if by >= 0 and self.grid[by, bx] != 0:
                return True
        return False

    def lock(self, cells: Iterable[Coordinate], value: int) -> None:
        """Write ``value`` into every cell; cells above the top edge are dropped."""
        for x, y in cells:
            if y >= 0:
                self.grid[y, x] = value

    def landing_y(self, shape: Shape, x: int, y: int) -> int:
        while not self.collides(shape, x, y + 1):
            y += 1
        return y

    def find_full_lines(self) -> List[int]:
        full_rows = np.where(np.all(self.grid != 0, axis=1))[0]
        return [int(r) for r in full_rows]

    def apply_clear(self, rows: Iterable[int]) -> int:
        """Remove ``rows`` and add as many empty rows at the top.

        Rows are removed in ascending order from the shrinking array, so each
        requested index is shifted by the number of rows already removed.
        """
        ordered = sorted(set(int(r) for r in rows))
        if not ordered:
            return 0
        remaining = self.grid
        for removed, row in enumerate(ordered):
            remaining = np.delete(remaining, row - removed, axis=0)
        new_rows = np.zeros((len(ordered), self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, remaining))
        return len(ordered)

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
