from __future__ import annotations

from datetime import date
from typing import Callable, List

import pytest

from blockfall.game import GameConfig, GameEvents, GameMode, GameSession


class FakeClock:
    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class RecordingEvents(GameEvents):
    def __init__(self) -> None:
        self.log: List[tuple] = []

    def on_lock(self) -> None:
        self.log.append(("lock",))

    def on_line_clear(self, count: int) -> None:
        self.log.append(("clear", count))

    def on_level_up(self, level: int) -> None:
        self.log.append(("level", level))

    def on_game_over(self, score: int) -> None:
        self.log.append(("game_over", score))


class MemoryBestScores:
    def __init__(self) -> None:
        self.scores: dict = {}

    def load(self, key: str) -> int:
        return self.scores.get(key, 0)

    def save_if_better(self, key: str, score: int) -> bool:
        if score <= self.scores.get(key, 0):
            return False
        self.scores[key] = score
        return True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def events() -> RecordingEvents:
    return RecordingEvents()


@pytest.fixture
def make_session(clock: FakeClock, events: RecordingEvents) -> Callable[..., GameSession]:
    def _make(mode: GameMode = GameMode.MARATHON, today: date = date(2024, 3, 5), **kwargs) -> GameSession:
        best_scores = kwargs.pop("best_scores", None)
        kwargs.setdefault("seed", 12345)
        config = GameConfig(mode=mode, **kwargs)
        return GameSession(config, events=events, best_scores=best_scores, clock=clock, today=lambda: today)

    return _make


@pytest.fixture
def best_scores() -> MemoryBestScores:
    return MemoryBestScores()
