from __future__ import annotations


class GameEvents:
    """Fire-and-forget notifications emitted by the engine.

    Subclass and override what you need; return values are ignored and the
    engine never reads anything back.
    """

    def on_start(self) -> None:
        pass

    def on_pause(self, paused: bool) -> None:
        pass

    def on_reset(self) -> None:
        pass

    def on_gravity_step(self) -> None:
        pass

    def on_lock(self) -> None:
        pass

    def on_line_clear(self, count: int) -> None:
        pass

    def on_level_up(self, level: int) -> None:
        pass

    def on_game_over(self, score: int) -> None:
        pass
