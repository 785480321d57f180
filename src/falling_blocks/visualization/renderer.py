from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import PIECE_COLORS, GameSnapshot, Piece, TetrominoType


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return (20, 20, 26)
    return PIECE_COLORS.get(TetrominoType(abs(v)), (200, 200, 200))


class Renderer:
    def __init__(self, cell_size: int = 28, margin: int = 20, panel_width: int = 160) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            width * self.cell_size + self.panel_width + self.margin * 3,
            height * self.cell_size + self.margin * 2,
        )

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, _color_for_value(int(state[y, x])), rect)
        return surf

    def _draw_preview(self, screen: pygame.Surface, piece: Optional[Piece], x0: int, y0: int) -> None:
        if piece is None:
            return
        size = self.cell_size // 2 + 4
        for cx, cy in piece.cells():
            rect = pygame.Rect(x0 + cx * size, y0 + cy * size, size - 1, size - 1)
            pygame.draw.rect(screen, PIECE_COLORS[piece.kind], rect)

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot, font: pygame.font.Font) -> None:
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(snapshot.overlay()), (self.margin, self.margin))

        panel_x = self.margin * 2 + snapshot.width * self.cell_size
        y = self.margin
        for label in (f"Score {snapshot.score}", f"Level {snapshot.level}", f"Lines {snapshot.lines}", "Next"):
            screen.blit(font.render(label, True, (230, 230, 230)), (panel_x, y))
            y += 30
        self._draw_preview(screen, snapshot.next_piece, panel_x, y)

        banner = None
        if snapshot.game_over:
            banner = "Game Over - R to restart"
        elif snapshot.paused:
            banner = "Paused - P to resume"
        if banner:
            text = font.render(banner, True, (255, 220, 220))
            rect = text.get_rect(center=(self.margin + snapshot.width * self.cell_size // 2,
                                         self.margin + snapshot.height * self.cell_size // 2))
            screen.blit(text, rect)
        pygame.display.flip()
