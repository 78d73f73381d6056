"""Piece randomizers.

``SeededRandom`` is a 32-bit counter-based generator (mulberry32) whose state
can be derived from a string, so a challenge is reproducible from its date
key alone. ``SevenBag`` deals every piece type exactly once per cycle of 7.
``UniformRandomizer`` is the plain unseeded variant.
"""

from __future__ import annotations

import time
from typing import Callable, List, Literal, Optional, Union

import numpy as np

from .pieces import TetrominoType

PieceRule = Literal["bag7", "uniform"]
Seed = Union[int, float, str, None]

MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_32 = 4294967296.0


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


def hash_seed(text: str) -> int:
    """Fold a string into 32 bits with the multiply-by-31 rolling hash."""
    h = 0
    for ch in text:
        h = (31 * h + ord(ch)) & MASK32
    return h


class SeededRandom:
    def __init__(self, seed: Seed = None, clock: Callable[[], int] = wall_clock_ms) -> None:
        self._clock = clock
        self.state = 0
        self.set_seed(seed)

    def set_seed(self, seed: Seed) -> None:
        if isinstance(seed, str) and seed:
            self.state = hash_seed(seed)
            return
        h = 0
        if isinstance(seed, (int, float)) and not isinstance(seed, bool):
            try:
                h = int(seed) & MASK32
            except (OverflowError, ValueError):
                # inf / nan
                h = 0
        if h == 0:
            h = self._clock() & MASK32
        self.state = h

    def next(self) -> float:
        self.state = (self.state + _INCREMENT) & MASK32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return ((t ^ (t >> 14)) & MASK32) / _TWO_32


class SevenBag:
    """7-bag dealer; any 7 consecutive draws from a fresh cycle are a permutation."""

    def __init__(self, rng: Optional[SeededRandom] = None) -> None:
        self.rng = rng or SeededRandom()
        self.bag: List[TetrominoType] = []

    def reseed(self, seed: Seed) -> None:
        self.rng.set_seed(seed)
        self.bag = []

    def refill(self) -> None:
        types = list(TetrominoType)
        for i in range(len(types) - 1, 0, -1):
            j = int(self.rng.next() * (i + 1))
            types[i], types[j] = types[j], types[i]
        self.bag.extend(types)

    def draw(self) -> TetrominoType:
        if not self.bag:
            self.refill()
        return self.bag.pop()


class UniformRandomizer:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = np.random.default_rng(seed)

    def reseed(self, seed: Seed) -> None:
        """Mode seeds do not apply to the plain variant; only the constructor seed counts."""
        return None

    def draw(self) -> TetrominoType:
        return TetrominoType(int(self.rng.integers(1, len(TetrominoType) + 1)))


Randomizer = Union[SevenBag, UniformRandomizer]


def make_randomizer(rule: PieceRule, clock: Callable[[], int] = wall_clock_ms) -> Randomizer:
    if rule == "bag7":
        return SevenBag(SeededRandom(clock=clock))
    if rule == "uniform":
        return UniformRandomizer()
    raise ValueError(f"unknown piece rule {rule!r}")
