from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np
import pygame

from blockfall.game import SessionSnapshot, SessionState, TetrominoType, format_time, shape_of

Color = Tuple[int, int, int]

PALETTE = {
    0: (20, 20, 26),
    int(TetrominoType.I): (0, 240, 240),
    int(TetrominoType.O): (240, 240, 0),
    int(TetrominoType.T): (160, 0, 240),
    int(TetrominoType.S): (0, 240, 0),
    int(TetrominoType.Z): (240, 0, 0),
    int(TetrominoType.J): (0, 0, 240),
    int(TetrominoType.L): (240, 160, 0),
}
GRID_LINE = (46, 137, 255)
TEXT = (230, 230, 235)


def _color_for_value(v: int) -> Color:
    return PALETTE.get(abs(int(v)), (200, 200, 200))


def shade(color: Color, percent: int) -> Color:
    """Lighten (positive) or darken (negative) a color by ``percent``."""
    return tuple(min(255, max(0, (c * (100 + percent)) // 100)) for c in color)  # type: ignore[return-value]


def flash_alpha(progress: float) -> int:
    """Overlay alpha for rows being cleared: rises then falls over the animation."""
    return int(255 * 0.8 * math.sin(max(0.0, min(1.0, progress)) * math.pi))


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_cells: int = 7) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_w = panel_cells * cell_size
        pygame.font.init()
        self.font = pygame.font.SysFont(None, 26)
        self.big_font = pygame.font.SysFont(None, 44)

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            self.margin * 3 + width * self.cell_size + self.panel_w,
            self.margin * 2 + height * self.cell_size,
        )

    def _block(self, surf: pygame.Surface, px: int, py: int, size: int, color: Color) -> None:
        pygame.draw.rect(surf, color, pygame.Rect(px, py, size, size))
        pygame.draw.rect(surf, shade(color, 40), pygame.Rect(px + 2, py + 2, size - 4, 3))
        pygame.draw.rect(surf, shade(color, 40), pygame.Rect(px + 2, py + 2, 3, size - 4))
        pygame.draw.rect(surf, shade(color, -35), pygame.Rect(px, py, size, size), 2)

    def _grid_surface(self, snap: SessionSnapshot) -> pygame.Surface:
        state: np.ndarray = snap.board
        h, w = state.shape
        cs = self.cell_size
        surf = pygame.Surface((w * cs, h * cs))
        surf.fill(PALETTE[0])
        for x in range(w + 1):
            pygame.draw.line(surf, GRID_LINE, (x * cs, 0), (x * cs, h * cs))
        for y in range(h + 1):
            pygame.draw.line(surf, GRID_LINE, (0, y * cs), (w * cs, y * cs))

        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                if v:
                    self._block(surf, x * cs, y * cs, cs, _color_for_value(v))

        if snap.clearing_rows:
            flash = pygame.Surface((w * cs, cs), pygame.SRCALPHA)
            flash.fill((255, 255, 255, flash_alpha(snap.clear_progress)))
            for y in snap.clearing_rows:
                surf.blit(flash, (0, y * cs))

        if snap.active is not None and snap.active_shape is not None:
            color = _color_for_value(int(snap.active.kind))
            if snap.ghost is not None:
                gx, gy, _ = snap.ghost
                ghost = pygame.Surface((cs, cs), pygame.SRCALPHA)
                ghost.fill((*color, 64))
                for dy, dx in zip(*np.nonzero(snap.active_shape)):
                    if gy + dy >= 0:
                        surf.blit(ghost, ((gx + int(dx)) * cs, (gy + int(dy)) * cs))
            for dy, dx in zip(*np.nonzero(snap.active_shape)):
                y = snap.active.y + int(dy)
                if y >= 0:
                    self._block(surf, (snap.active.x + int(dx)) * cs, y * cs, cs, color)
        return surf

    def _preview(self, screen: pygame.Surface, kind: Optional[TetrominoType], x0: int, y0: int, label: str) -> int:
        screen.blit(self.font.render(label, True, TEXT), (x0, y0))
        y0 += 26
        size = 24
        if kind is not None:
            shape = shape_of(kind, 0)
            for dy, dx in zip(*np.nonzero(shape)):
                self._block(screen, x0 + int(dx) * size, y0 + int(dy) * size, size, _color_for_value(int(kind)))
        return y0 + 3 * size

    def _panel(self, screen: pygame.Surface, snap: SessionSnapshot, x0: int) -> None:
        y = self.margin
        y = self._preview(screen, snap.next_kind, x0, y, "Next")
        y = self._preview(screen, snap.held, x0, y, "Hold")
        lines = [
            f"Mode   {snap.mode.value}",
            f"Time   {format_time(snap.time_ms)}",
            f"Score  {snap.score}",
            f"Best   {snap.best_score}",
            f"Level  {snap.level}",
            f"Lines  {snap.lines}",
        ]
        for text in lines:
            screen.blit(self.font.render(text, True, TEXT), (x0, y))
            y += 28

    def _banner(self, screen: pygame.Surface, text: str) -> None:
        msg = self.big_font.render(text, True, (255, 255, 255))
        rect = msg.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
        backdrop = pygame.Surface((rect.width + 24, rect.height + 16), pygame.SRCALPHA)
        backdrop.fill((0, 0, 0, 170))
        screen.blit(backdrop, (rect.x - 12, rect.y - 8))
        screen.blit(msg, rect)

    def draw(self, screen: pygame.Surface, snap: SessionSnapshot) -> None:
        grid_surf = self._grid_surface(snap)
        screen.fill((10, 10, 14))
        screen.blit(grid_surf, (self.margin, self.margin))
        self._panel(screen, snap, self.margin * 2 + grid_surf.get_width())

        if snap.state is SessionState.IDLE:
            self._banner(screen, "Press Enter to start")
        elif snap.state is SessionState.PAUSED:
            self._banner(screen, "Paused (P to resume)")
        elif snap.state is SessionState.GAME_OVER:
            self._banner(screen, f"Game over: {snap.score}  (R to restart)")
        pygame.display.flip()
