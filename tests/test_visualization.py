from __future__ import annotations

import pytest

from blockfall.game import Command
from blockfall.visualization.human_play import KEY_TO_COMMAND, _parse_seed, build_parser
from blockfall.visualization.renderer import flash_alpha, shade


def test_shade_clamps_channels() -> None:
    assert shade((100, 200, 250), 40) == (140, 255, 255)
    assert shade((100, 200, 0), -50) == (50, 100, 0)


@pytest.mark.parametrize("progress, alpha", [(0.0, 0), (0.5, 204), (1.0, 0), (-1.0, 0)])
def test_flash_alpha_peaks_mid_animation(progress: float, alpha: int) -> None:
    assert flash_alpha(progress) == alpha


def test_parse_seed_keeps_strings() -> None:
    assert _parse_seed(None) is None
    assert _parse_seed("42") == 42
    assert _parse_seed("daily-20240305") == "daily-20240305"


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["--mode", "zen", "--immediate-clear"])
    assert args.mode == "zen"
    assert args.immediate_clear is True
    assert args.uniform is False
    assert args.store is None


def test_every_gameplay_command_has_a_key() -> None:
    assert set(KEY_TO_COMMAND.values()) == set(Command)
