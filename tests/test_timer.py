from __future__ import annotations

from datetime import date

import pytest

from blockfall.game import GameMode, ModeTimer, daily_key, format_time, mode_key, weekly_key
from blockfall.game.modes import seed_for_mode


def test_count_up_excludes_paused_time() -> None:
    timer = ModeTimer(None)
    timer.start(0)
    assert timer.elapsed_ms(500) == 500
    timer.pause(500)
    assert timer.elapsed_ms(10_000) == 500
    timer.resume(10_000)
    assert timer.elapsed_ms(10_250) == 750
    assert timer.display_ms(10_250) == 750


def test_count_up_never_expires() -> None:
    timer = ModeTimer(None)
    timer.start(0)
    assert timer.tick(10**9) is False


def test_countdown_decrements_by_wall_clock_delta() -> None:
    timer = ModeTimer(120_000)
    timer.start(0)
    assert timer.tick(100) is False
    assert timer.remaining_ms == 119_900
    timer.pause(100)
    timer.resume(50_000)
    assert timer.tick(50_100) is False
    assert timer.remaining_ms == 119_800
    assert timer.tick(50_100 + 119_800) is True
    assert timer.display_ms(0) == 0


def test_countdown_clamps_at_zero() -> None:
    timer = ModeTimer(1_000)
    timer.start(0)
    assert timer.tick(5_000) is True
    assert timer.remaining_ms == 0


def test_stop_folds_open_segment() -> None:
    timer = ModeTimer(None)
    timer.start(100)
    timer.stop(400)
    assert timer.elapsed_ms(9_999) == 300
    timer.clear()
    assert timer.elapsed_ms(9_999) == 0


@pytest.mark.parametrize("ms, text", [(0, "00:00"), (999, "00:00"), (61_999, "01:01"), (-5, "00:00"), (600_000, "10:00")])
def test_format_time(ms: int, text: str) -> None:
    assert format_time(ms) == text


def test_mode_flags() -> None:
    assert GameMode.ULTRA120.countdown_ms == 120_000
    assert GameMode.ULTRA180.countdown_ms == 180_000
    assert GameMode.MARATHON.countdown_ms is None
    assert GameMode.ZEN.no_loss
    assert not GameMode.MARATHON.no_loss
    assert GameMode("daily").reproducible
    with pytest.raises(ValueError):
        GameMode("sprint")


def test_date_keys() -> None:
    d = date(2024, 3, 5)
    assert daily_key(d) == "20240305"
    assert weekly_key(d) == "2024W10"
    # ISO week years: Jan 1st 2021 belongs to week 53 of 2020
    assert weekly_key(date(2021, 1, 1)) == "2020W53"


def test_mode_key() -> None:
    d = date(2024, 3, 5)
    assert mode_key(GameMode.DAILY, d) == "daily-20240305"
    assert mode_key(GameMode.WEEKLY, d) == "weekly-2024W10"
    assert mode_key(GameMode.ULTRA120, d) == "ultra120"


def test_seed_for_mode() -> None:
    d = date(2024, 3, 5)
    assert seed_for_mode(GameMode.DAILY, d, 42) == "daily-20240305"
    assert seed_for_mode(GameMode.WEEKLY, d, 42) == "weekly-2024W10"
    assert seed_for_mode(GameMode.ZEN, d, 42) == 42
