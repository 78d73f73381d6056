"""Play modes and the seeds/keys derived from them."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional, Union


class GameMode(str, Enum):
    MARATHON = "marathon"
    ZEN = "zen"
    DAILY = "daily"
    WEEKLY = "weekly"
    ULTRA120 = "ultra120"
    ULTRA180 = "ultra180"

    @property
    def countdown_ms(self) -> Optional[int]:
        """Total duration for the timed modes, None for count-up modes."""
        return _COUNTDOWNS.get(self)

    @property
    def is_countdown(self) -> bool:
        return self in _COUNTDOWNS

    @property
    def no_loss(self) -> bool:
        return self is GameMode.ZEN

    @property
    def reproducible(self) -> bool:
        return self in (GameMode.DAILY, GameMode.WEEKLY)


_COUNTDOWNS = {
    GameMode.ULTRA120: 120_000,
    GameMode.ULTRA180: 180_000,
}


def daily_key(today: date) -> str:
    return f"{today.year}{today.month:02d}{today.day:02d}"


def weekly_key(today: date) -> str:
    iso_year, iso_week, _ = today.isocalendar()
    return f"{iso_year}W{iso_week}"


def mode_key(mode: GameMode, today: date) -> str:
    """Key under which best scores are kept; challenge modes are keyed per period."""
    if mode is GameMode.DAILY:
        return "daily-" + daily_key(today)
    if mode is GameMode.WEEKLY:
        return "weekly-" + weekly_key(today)
    return mode.value


def seed_for_mode(mode: GameMode, today: date, now_ms: int) -> Union[str, int]:
    if mode.reproducible:
        return mode_key(mode, today)
    return now_ms
