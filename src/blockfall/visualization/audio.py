"""Synthesized sound effects and background music.

Tones are generated with numpy and played through ``pygame.mixer``. The
player subscribes to engine events; it never touches engine state.
"""

from __future__ import annotations

import heapq
import logging
from typing import Callable, List, Literal, Optional, Tuple

import numpy as np
import pygame

from blockfall.game import GameEvents

logger = logging.getLogger(__name__)

Wave = Literal["sine", "square", "sawtooth", "triangle"]

SAMPLE_RATE = 22050
MUSIC_NOTES = (196.0, 246.94, 293.66, 246.94, 220.0, 277.18, 329.63, 277.18)
MUSIC_STEP_MS = 420
LEVEL_UP_NOTES = (523.25, 659.25, 783.99)


def tone_samples(
    freq: float,
    duration: float,
    wave: Wave = "sine",
    volume: float = 0.5,
    sample_rate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Mono int16 samples for one note with a short attack and exponential decay."""
    n = max(1, int(duration * sample_rate))
    t = np.arange(n, dtype=np.float64) / sample_rate
    phase = (freq * t) % 1.0
    if wave == "square":
        raw = np.where(phase < 0.5, 1.0, -1.0)
    elif wave == "sawtooth":
        raw = 2.0 * phase - 1.0
    elif wave == "triangle":
        raw = 1.0 - 4.0 * np.abs(phase - 0.5)
    else:
        raw = np.sin(2.0 * np.pi * phase)

    attack = max(1, int(0.01 * sample_rate))
    env = np.exp(np.linspace(0.0, np.log(1e-4), n))
    env[:attack] *= np.linspace(0.0, 1.0, min(attack, n))
    out = raw * env * float(np.clip(volume, 0.0, 1.0))
    return (out * 32767).astype(np.int16)


class SoundPlayer(GameEvents):
    def __init__(self, volume: float = 0.15, muted: bool = False, clock: Callable[[], int] = pygame.time.get_ticks) -> None:
        self.volume = min(1.0, max(0.0, float(volume)))
        self.muted = muted
        self.clock = clock
        self.enabled = False
        self.suspended = False
        self.music_on = False
        self._music_index = 0
        self._next_music_ms = 0
        self._queue: List[Tuple[int, int, Tuple[float, float, Wave, float]]] = []
        self._seq = 0
        self._channels = 1

    def open(self) -> bool:
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            init = pygame.mixer.get_init()
        except pygame.error as e:
            logger.warning("audio disabled: %s", e)
            self.enabled = False
            return False
        self._channels = init[2] if init else 1
        self.enabled = True
        return True

    # ----- controls ---------------------------------------------------

    def set_volume(self, volume: float) -> None:
        self.volume = min(1.0, max(0.0, float(volume)))

    def set_muted(self, muted: bool) -> None:
        self.muted = bool(muted)

    def toggle_mute(self) -> bool:
        self.set_muted(not self.muted)
        return self.muted

    def play_tone(self, freq: float, duration: float = 0.12, wave: Wave = "sine", volume: float = 0.5) -> None:
        if not self.enabled or self.muted or self.suspended:
            return
        samples = tone_samples(freq, duration, wave, volume * self.volume)
        if self._channels > 1:
            samples = np.repeat(samples[:, None], self._channels, axis=1)
        pygame.sndarray.make_sound(np.ascontiguousarray(samples)).play()

    def schedule(self, delay_ms: int, freq: float, duration: float, wave: Wave, volume: float) -> None:
        self._seq += 1
        heapq.heappush(self._queue, (self.clock() + delay_ms, self._seq, (freq, duration, wave, volume)))

    def update(self, now: Optional[int] = None) -> None:
        """Play queued notes that are due and advance the music loop."""
        now = self.clock() if now is None else now
        while self._queue and self._queue[0][0] <= now:
            _, _, note = heapq.heappop(self._queue)
            self.play_tone(*note)
        if self.music_on and not self.suspended and now >= self._next_music_ms:
            freq = MUSIC_NOTES[self._music_index % len(MUSIC_NOTES)]
            self.play_tone(freq, 0.18, "sine", 0.08)
            self._music_index += 1
            self._next_music_ms = now + MUSIC_STEP_MS

    # ----- engine events ----------------------------------------------

    def on_start(self) -> None:
        self.suspended = False
        self.music_on = True
        self._music_index = 0
        self._next_music_ms = self.clock()

    def on_pause(self, paused: bool) -> None:
        self.suspended = paused

    def on_reset(self) -> None:
        self.music_on = False
        self._queue.clear()

    def on_gravity_step(self) -> None:
        self.play_tone(660, 0.03, "triangle", 0.08)

    def on_lock(self) -> None:
        self.play_tone(220, 0.08, "square", 0.4)

    def on_line_clear(self, count: int) -> None:
        for i in range(count):
            self.schedule(i * 70, 440 * (1 + i * 0.15), 0.15, "sawtooth", 0.25)

    def on_level_up(self, level: int) -> None:
        for i, freq in enumerate(LEVEL_UP_NOTES):
            self.schedule(i * 90, freq, 0.12, "square", 0.35)

    def on_game_over(self, score: int) -> None:
        self.music_on = False
