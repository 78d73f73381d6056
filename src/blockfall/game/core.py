from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Callable, Optional, Protocol, Sequence, Tuple

import numpy as np

from .events import GameEvents
from .grid import GameGrid
from .modes import GameMode, mode_key, seed_for_mode
from .pieces import Piece, Shape, TetrominoType, shape_of
from .rng import PieceRule, Randomizer, Seed, make_randomizer, wall_clock_ms
from .rules import ScoringRules
from .timer import ModeTimer

logger = logging.getLogger(__name__)

_PIECE_RULES = ("bag7", "uniform")
_CLEAR_PROTOCOLS = ("animated", "immediate")


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    HARD_DROP = 4
    TOGGLE_PAUSE = 5
    HOLD = 6


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    mode: GameMode = GameMode.MARATHON
    piece_rule: PieceRule = "bag7"
    clear_protocol: str = "animated"
    clear_animation_ms: int = 400
    timer_period_ms: int = 100
    # Overrides the mode seed when set.
    seed: Seed = None

    def __post_init__(self) -> None:
        self.mode = GameMode(self.mode)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board size must be positive, got {self.width}x{self.height}")
        if self.piece_rule not in _PIECE_RULES:
            raise ValueError(f"piece_rule must be one of {_PIECE_RULES}, got {self.piece_rule!r}")
        if self.clear_protocol not in _CLEAR_PROTOCOLS:
            raise ValueError(f"clear_protocol must be one of {_CLEAR_PROTOCOLS}, got {self.clear_protocol!r}")
        if self.clear_animation_ms < 0:
            raise ValueError("clear_animation_ms must be >= 0")


@dataclass
class HoldSlot:
    held: Optional[TetrominoType] = None
    used_this_spawn: bool = False

    def reset(self) -> None:
        self.held = None
        self.used_this_spawn = False


@dataclass
class ClearState:
    rows: Tuple[int, ...]
    start_ms: int

    def progress(self, now: int, duration_ms: int) -> float:
        if duration_ms <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - self.start_ms) / duration_ms))


class BestScores(Protocol):
    def load(self, key: str) -> int: ...

    def save_if_better(self, key: str, score: int) -> bool: ...


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view handed to renderers."""

    board: np.ndarray
    state: SessionState
    mode: GameMode
    active: Optional[Piece]
    active_shape: Optional[Shape]
    ghost: Optional[Tuple[int, int, int]]
    held: Optional[TetrominoType]
    next_kind: Optional[TetrominoType]
    score: int
    level: int
    lines: int
    best_score: int
    time_ms: int
    clearing_rows: Tuple[int, ...] = field(default_factory=tuple)
    clear_progress: float = 0.0


class GameSession:
    """One game of falling blocks, from start to game over.

    Drive it with :meth:`tick` once per frame and :meth:`timer_tick` every
    ``config.timer_period_ms``; feed player input through :meth:`handle`.
    Both ticks do nothing unless the session is running.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        *,
        events: Optional[GameEvents] = None,
        best_scores: Optional[BestScores] = None,
        clock: Callable[[], int] = wall_clock_ms,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.events = events or GameEvents()
        self.best_scores = best_scores
        self.clock = clock
        self.today = today

        self.grid = GameGrid(self.config.width, self.config.height)
        self.randomizer: Randomizer = make_randomizer(self.config.piece_rule, clock=clock)
        self.timer = ModeTimer(self.config.mode.countdown_ms)
        self.hold = HoldSlot()
        self.clear_state: Optional[ClearState] = None

        self.state = SessionState.IDLE
        self.current_piece: Optional[Piece] = None
        self.next_kind: Optional[TetrominoType] = None
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.drop_interval_ms = self.rules.drop_interval_ms(1)
        self._last_drop_ms = 0
        self._paused_at_ms = 0
        self.best_score = self._load_best()

    # ----- properties -------------------------------------------------

    @property
    def mode(self) -> GameMode:
        return self.config.mode

    @property
    def running(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def paused(self) -> bool:
        return self.state is SessionState.PAUSED

    @property
    def game_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    @property
    def animating_clear(self) -> bool:
        return self.clear_state is not None

    @property
    def spawn_x(self) -> int:
        return self.config.width // 2 - 1

    def mode_key(self, mode: Optional[GameMode] = None) -> str:
        return mode_key(mode or self.mode, self.today())

    # ----- lifecycle --------------------------------------------------

    def start(self) -> bool:
        if self.state not in (SessionState.IDLE, SessionState.GAME_OVER):
            return False
        now = self.clock()
        self._reset_scalars()
        self.grid.reset()
        self.hold.reset()
        self.clear_state = None
        self.current_piece = None

        seed = self.config.seed
        if seed is None:
            seed = seed_for_mode(self.mode, self.today(), now)
        self.randomizer.reseed(seed)

        self.state = SessionState.RUNNING
        self.next_kind = self.randomizer.draw()
        self._spawn_piece()
        if self.state is SessionState.RUNNING:
            self.timer.configure(self.mode.countdown_ms)
            self.timer.start(now)
        self._last_drop_ms = now
        logger.info("game started: mode=%s seed=%r", self.mode.value, seed)
        self.events.on_start()
        return True

    def pause(self) -> bool:
        if self.state is not SessionState.RUNNING:
            return False
        now = self.clock()
        self.state = SessionState.PAUSED
        self.timer.pause(now)
        self._paused_at_ms = now
        logger.debug("paused")
        self.events.on_pause(True)
        return True

    def resume(self) -> bool:
        if self.state is not SessionState.PAUSED:
            return False
        now = self.clock()
        self.timer.resume(now)
        self._last_drop_ms = now
        if self.clear_state is not None:
            # Paused time does not count toward the clear animation.
            self.clear_state.start_ms += now - self._paused_at_ms
        self.state = SessionState.RUNNING
        logger.debug("resumed")
        self.events.on_pause(False)
        return True

    def toggle_pause(self) -> bool:
        if self.state is SessionState.RUNNING:
            return self.pause()
        if self.state is SessionState.PAUSED:
            return self.resume()
        return False

    def reset(self) -> None:
        self.state = SessionState.IDLE
        self._reset_scalars()
        self.grid.reset()
        self.current_piece = None
        self.next_kind = None
        self.hold.reset()
        self.clear_state = None
        self.timer.clear()
        logger.debug("session reset")
        self.events.on_reset()

    def restart(self) -> bool:
        self.reset()
        return self.start()

    def change_mode(self, mode: GameMode) -> None:
        was_active = self.state in (SessionState.RUNNING, SessionState.PAUSED)
        self.config.mode = GameMode(mode)
        self.timer.configure(self.config.mode.countdown_ms)
        self.best_score = self._load_best()
        if was_active:
            self.reset()

    def _reset_scalars(self) -> None:
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.drop_interval_ms = self.rules.drop_interval_ms(1)

    def _end_game(self) -> None:
        self.state = SessionState.GAME_OVER
        self.timer.stop(self.clock())
        logger.info("game over: mode=%s score=%d lines=%d", self.mode.value, self.score, self.lines_cleared)
        self._save_best()
        self.events.on_game_over(self.score)

    def _load_best(self) -> int:
        if self.best_scores is None:
            return 0
        key = self.mode_key()
        try:
            return self.best_scores.load(key)
        except Exception as e:
            logger.warning("best score load for %s skipped: %s", key, e)
            return 0

    def _save_best(self) -> None:
        if self.best_scores is not None:
            key = self.mode_key()
            try:
                if self.best_scores.save_if_better(key, self.score):
                    self.best_score = self.score
                    return
            except Exception as e:
                logger.warning("best score save for %s skipped: %s", key, e)
        self.best_score = max(self.best_score, self.score)

    # ----- periodic callbacks -----------------------------------------

    def tick(self, now: Optional[int] = None) -> None:
        """Per-frame step: finish a pending clear, or let gravity act."""
        if self.state is not SessionState.RUNNING:
            return
        now = self.clock() if now is None else now

        if self.clear_state is not None:
            if now - self.clear_state.start_ms >= self.config.clear_animation_ms:
                self._finish_clear()
                self._last_drop_ms = now
            return

        if now - self._last_drop_ms > self.drop_interval_ms:
            if self.move_piece(0, 1):
                self.events.on_gravity_step()
            self._last_drop_ms = now

    def timer_tick(self, now: Optional[int] = None) -> None:
        if self.state is not SessionState.RUNNING:
            return
        now = self.clock() if now is None else now
        if self.timer.tick(now):
            self._end_game()

    # ----- input ------------------------------------------------------

    def handle(self, command: Command) -> bool:
        if command is Command.TOGGLE_PAUSE:
            return self.toggle_pause()
        if self.state is not SessionState.RUNNING:
            return False
        if command is Command.MOVE_LEFT:
            return self.move_piece(-1, 0)
        if command is Command.MOVE_RIGHT:
            return self.move_piece(1, 0)
        if command is Command.SOFT_DROP:
            return self.move_piece(0, 1)
        if command is Command.ROTATE:
            return self.rotate_piece()
        if command is Command.HARD_DROP:
            had_piece = self.current_piece is not None
            self.hard_drop()
            return had_piece
        if command is Command.HOLD:
            return self.hold_piece()
        return False

    # ----- active piece -----------------------------------------------

    def check_collision(self, x: int, y: int, rotation: int, kind: Optional[TetrominoType] = None) -> bool:
        if kind is None:
            if self.current_piece is None:
                return True
            kind = self.current_piece.kind
        return self.grid.collides(shape_of(kind, rotation), x, y)

    def move_piece(self, dx: int, dy: int) -> bool:
        piece = self.current_piece
        if piece is None or self.state is not SessionState.RUNNING:
            return False
        new_x = piece.x + dx
        new_y = piece.y + dy
        if not self.check_collision(new_x, new_y, piece.rotation):
            piece.x = new_x
            piece.y = new_y
            return True
        if dy > 0:
            self._place_piece()
        return False

    def rotate_piece(self) -> bool:
        piece = self.current_piece
        if piece is None or self.state is not SessionState.RUNNING:
            return False
        new_rotation = piece.next_rotation()
        if self.check_collision(piece.x, piece.y, new_rotation):
            return False
        piece.rotation = new_rotation
        return True

    def hard_drop(self) -> int:
        dropped = 0
        while self.move_piece(0, 1):
            dropped += 1
            self.score += self.rules.hard_drop_points
        return dropped

    def hold_piece(self) -> bool:
        piece = self.current_piece
        if piece is None or self.state is not SessionState.RUNNING or self.hold.used_this_spawn:
            return False

        if self.hold.held is None:
            if self.next_kind is None:
                return False
            incoming = self.next_kind
        else:
            incoming = self.hold.held
        if self.check_collision(self.spawn_x, 0, 0, kind=incoming):
            return False

        if self.hold.held is None:
            self.next_kind = self.randomizer.draw()
        self.hold.held = piece.kind
        self.current_piece = Piece(incoming, 0, self.spawn_x, 0)
        self.hold.used_this_spawn = True
        return True

    def ghost_position(self) -> Optional[Tuple[int, int, int]]:
        piece = self.current_piece
        if piece is None:
            return None
        y = self.grid.landing_y(piece.shape(), piece.x, piece.y)
        return piece.x, y, piece.rotation

    def _spawn_piece(self) -> None:
        if self.next_kind is None:
            self.next_kind = self.randomizer.draw()
        self.current_piece = Piece(self.next_kind, 0, self.spawn_x, 0)
        self.next_kind = self.randomizer.draw()

        if self.check_collision(self.current_piece.x, self.current_piece.y, 0):
            if self.mode.no_loss:
                logger.debug("spawn blocked in %s mode; clearing board", self.mode.value)
                self.grid.reset()
            else:
                self._end_game()
        self.hold.used_this_spawn = False

    def _place_piece(self) -> None:
        piece = self.current_piece
        if piece is None:
            return
        self.grid.lock(piece.cells(), int(piece.kind))
        self.current_piece = None
        self.events.on_lock()

        rows = self.grid.find_full_lines()
        if not rows:
            self._spawn_piece()
            return

        self.events.on_line_clear(len(rows))
        if self.config.clear_protocol == "immediate":
            self._apply_clear(rows)
            self._spawn_piece()
        else:
            self.clear_state = ClearState(tuple(rows), self.clock())

    # ----- line clears ------------------------------------------------

    def _finish_clear(self) -> None:
        assert self.clear_state is not None
        rows = self.clear_state.rows
        self.clear_state = None
        self._apply_clear(rows)
        self._spawn_piece()

    def _apply_clear(self, rows: Sequence[int]) -> None:
        cleared = self.grid.apply_clear(rows)
        prev_level = self.level
        self.score += self.rules.score_for_lines(cleared, prev_level)
        self.lines_cleared += cleared
        self.level = self.rules.level_for_lines(self.lines_cleared)
        self.drop_interval_ms = self.rules.drop_interval_ms(self.level)
        if self.level > prev_level:
            logger.debug("level up: %d -> %d", prev_level, self.level)
            self.events.on_level_up(self.level)

    # ----- rendering --------------------------------------------------

    def snapshot(self, now: Optional[int] = None) -> SessionSnapshot:
        now = self.clock() if now is None else now
        piece = self.current_piece
        clearing: Tuple[int, ...] = ()
        progress = 0.0
        if self.clear_state is not None:
            clearing = self.clear_state.rows
            progress = self.clear_state.progress(now, self.config.clear_animation_ms)
        return SessionSnapshot(
            board=self.grid.clone_state(),
            state=self.state,
            mode=self.mode,
            active=Piece(piece.kind, piece.rotation, piece.x, piece.y) if piece is not None else None,
            active_shape=piece.shape() if piece is not None else None,
            ghost=self.ghost_position(),
            held=self.hold.held,
            next_kind=self.next_kind,
            score=self.score,
            level=self.level,
            lines=self.lines_cleared,
            best_score=self.best_score,
            time_ms=self.timer.display_ms(now),
            clearing_rows=clearing,
            clear_progress=progress,
        )
