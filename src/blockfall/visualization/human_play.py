from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, Optional

import pygame

from blockfall.game import Command, GameConfig, GameMode, GameSession
from blockfall.storage import BestScoreStore, JsonStore, SettingsStore
from blockfall.utils.logging import setup_logger

from .audio import SoundPlayer
from .renderer import Renderer

KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_UP: Command.ROTATE,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_p: Command.TOGGLE_PAUSE,
    pygame.K_LSHIFT: Command.HOLD,
    pygame.K_RSHIFT: Command.HOLD,
}

MODE_KEYS: Dict[int, GameMode] = {
    pygame.K_1: GameMode.MARATHON,
    pygame.K_2: GameMode.ZEN,
    pygame.K_3: GameMode.DAILY,
    pygame.K_4: GameMode.WEEKLY,
    pygame.K_5: GameMode.ULTRA120,
    pygame.K_6: GameMode.ULTRA180,
}

TIMER_EVENT = pygame.USEREVENT + 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play blockfall")
    p.add_argument("--mode", choices=[m.value for m in GameMode], default=None,
                   help="Play mode (defaults to the last saved one)")
    p.add_argument("--seed", type=str, default=None, help="Override the piece sequence seed")
    p.add_argument("--store", type=Path, default=None, help="JSON file for best scores and settings")
    p.add_argument("--immediate-clear", action="store_true", help="Skip the line clear animation")
    p.add_argument("--uniform", action="store_true", help="Plain random pieces instead of the 7-bag")
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--log-level", type=str, default="info")
    return p


def _parse_seed(raw: Optional[str]):
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return raw


def run(argv: Optional[list] = None) -> None:
    args = build_parser().parse_args(argv)
    log = setup_logger(name="blockfall", level=args.log_level)

    store = JsonStore(args.store)
    settings_store = SettingsStore(store)
    settings = settings_store.load()
    if args.mode is not None:
        settings.mode = GameMode(args.mode)

    config = GameConfig(
        mode=settings.mode,
        piece_rule="uniform" if args.uniform else "bag7",
        clear_protocol="immediate" if args.immediate_clear else "animated",
        seed=_parse_seed(args.seed),
    )

    pygame.init()
    try:
        sound = SoundPlayer(volume=settings.volume, muted=settings.muted)
        sound.open()
        session = GameSession(config, events=sound, best_scores=BestScoreStore(store))
        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("blockfall")
        clock = pygame.time.Clock()
        pygame.time.set_timer(TIMER_EVENT, config.timer_period_ms)
        log.info("mode=%s best=%d (Enter: start, 1-6: mode, M: mute, +/-: volume)",
                 session.mode.value, session.best_score)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == TIMER_EVENT:
                    session.timer_tick()
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_RETURN:
                        session.start()
                    elif event.key == pygame.K_r:
                        session.restart()
                    elif event.key == pygame.K_BACKSPACE:
                        session.reset()
                    elif event.key == pygame.K_m:
                        settings.muted = sound.toggle_mute()
                        settings_store.save(settings)
                    elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_MINUS):
                        step = -0.05 if event.key == pygame.K_MINUS else 0.05
                        sound.set_volume(sound.volume + step)
                        settings.volume = sound.volume
                        settings_store.save(settings)
                    elif event.key in MODE_KEYS:
                        session.change_mode(MODE_KEYS[event.key])
                        settings.mode = session.mode
                        settings_store.save(settings)
                    else:
                        command = KEY_TO_COMMAND.get(event.key)
                        if command is not None:
                            session.handle(command)

            session.tick()
            sound.update()
            renderer.draw(screen, session.snapshot())
            clock.tick(args.fps)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
