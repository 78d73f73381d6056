from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _shape(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


# Rotation states in cycle order; index 0 is the spawn orientation.
PIECE_ROTATIONS: Dict[TetrominoType, Tuple[Shape, ...]] = {
    TetrominoType.I: (
        _shape([[1, 1, 1, 1]]),
        _shape([[1], [1], [1], [1]]),
    ),
    TetrominoType.O: (
        _shape([[1, 1], [1, 1]]),
    ),
    TetrominoType.T: (
        _shape([[0, 1, 0], [1, 1, 1]]),
        _shape([[1, 0], [1, 1], [1, 0]]),
        _shape([[1, 1, 1], [0, 1, 0]]),
        _shape([[0, 1], [1, 1], [0, 1]]),
    ),
    TetrominoType.S: (
        _shape([[0, 1, 1], [1, 1, 0]]),
        _shape([[1, 0], [1, 1], [0, 1]]),
    ),
    TetrominoType.Z: (
        _shape([[1, 1, 0], [0, 1, 1]]),
        _shape([[0, 1], [1, 1], [1, 0]]),
    ),
    TetrominoType.J: (
        _shape([[1, 0, 0], [1, 1, 1]]),
        _shape([[1, 1], [1, 0], [1, 0]]),
        _shape([[1, 1, 1], [0, 0, 1]]),
        _shape([[0, 1], [0, 1], [1, 1]]),
    ),
    TetrominoType.L: (
        _shape([[0, 0, 1], [1, 1, 1]]),
        _shape([[1, 0], [1, 0], [1, 1]]),
        _shape([[1, 1, 1], [1, 0, 0]]),
        _shape([[1, 1], [0, 1], [0, 1]]),
    ),
}


def rotation_count(kind: TetrominoType) -> int:
    return len(PIECE_ROTATIONS[kind])


def shape_of(kind: TetrominoType, rotation: int) -> Shape:
    rotations = PIECE_ROTATIONS[kind]
    return rotations[rotation % len(rotations)]


def cells_of(shape: Shape, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
    """Absolute (x, y) board coordinates of the occupied cells of ``shape``."""
    ys, xs = np.nonzero(shape)
    return [(origin_x + int(dx), origin_y + int(dy)) for dy, dx in zip(ys, xs)]


@dataclass
class Piece:
    """The active piece pose; (x, y) is the top-left of its bounding matrix."""

    kind: TetrominoType
    rotation: int = 0
    x: int = 0
    y: int = 0

    def shape(self) -> Shape:
        return shape_of(self.kind, self.rotation)

    def next_rotation(self) -> int:
        return (self.rotation + 1) % rotation_count(self.kind)

    def cells(self) -> List[Tuple[int, int]]:
        return cells_of(self.shape(), self.x, self.y)
