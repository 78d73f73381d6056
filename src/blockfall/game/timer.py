from __future__ import annotations

from typing import Optional


class ModeTimer:
    """Elapsed or remaining play time, robust to pauses.

    Count-up time is ``accumulated + (now - segment_start)`` while a segment
    is active; pausing folds the open segment into the accumulator and
    resuming opens a new one. Countdown time is decremented by the wall-clock
    delta since the previous tick, and the tick anchor is moved to ``now`` on
    resume so paused time is never charged.
    """

    def __init__(self, countdown_ms: Optional[int] = None) -> None:
        self.countdown_ms = countdown_ms
        self.accumulated_ms = 0
        self.remaining_ms = 0
        self.running = False
        self._segment_start: Optional[int] = None
        self._last_tick: Optional[int] = None

    @property
    def is_countdown(self) -> bool:
        return self.countdown_ms is not None

    def configure(self, countdown_ms: Optional[int]) -> None:
        self.stop()
        self.countdown_ms = countdown_ms
        self.accumulated_ms = 0
        self.remaining_ms = 0

    def start(self, now: int) -> None:
        self.accumulated_ms = 0
        self.remaining_ms = self.countdown_ms or 0
        self._segment_start = now
        self._last_tick = now
        self.running = True

    def stop(self, now: Optional[int] = None) -> None:
        if self.running and now is not None and self._segment_start is not None:
            self.accumulated_ms += now - self._segment_start
        self._segment_start = None
        self._last_tick = None
        self.running = False

    def clear(self) -> None:
        self.stop()
        self.accumulated_ms = 0
        self.remaining_ms = 0

    def pause(self, now: int) -> None:
        if not self.running:
            return
        if not self.is_countdown and self._segment_start is not None:
            self.accumulated_ms += now - self._segment_start
        self._segment_start = None

    def resume(self, now: int) -> None:
        if not self.running:
            return
        if self.is_countdown:
            self._last_tick = now
        else:
            self._segment_start = now

    def tick(self, now: int) -> bool:
        """Advance a countdown; returns True once it has run out."""
        if not self.running or not self.is_countdown:
            return False
        last = self._last_tick if self._last_tick is not None else now
        self._last_tick = now
        self.remaining_ms = max(0, self.remaining_ms - (now - last))
        return self.remaining_ms <= 0

    def elapsed_ms(self, now: int) -> int:
        if self._segment_start is None:
            return self.accumulated_ms
        return self.accumulated_ms + max(0, now - self._segment_start)

    def display_ms(self, now: int) -> int:
        if self.is_countdown:
            return max(0, self.remaining_ms)
        return self.elapsed_ms(now)


def format_time(ms: float) -> str:
    total_s = max(0, int(ms)) // 1000
    return f"{total_s // 60:02d}:{total_s % 60:02d}"
