from __future__ import annotations

from typing import Optional, Tuple

import pygame

from escape_puzzle_rl.env.escape_env import VARIANT_COLORS
from escape_puzzle_rl.game import EscapeGame, GameState, Tool
from escape_puzzle_rl.game.grid import round_cell


BOMB_COLOR = (230, 60, 60)
HINT_COLOR = (255, 70, 70)


def _shade(color: Tuple[int, int, int], factor: float) -> Tuple[int, int, int]:
    return tuple(max(0, min(255, int(c * factor))) for c in color)  # type: ignore[return-value]


class Renderer:
    def __init__(self, cell_size: int = 36, gap: int = 3, margin: int = 20, top_bar: int = 40) -> None:
        self.cell_size = cell_size
        self.gap = gap
        self.margin = margin
        self.top_bar = top_bar
        self._font: Optional[pygame.font.Font] = None

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 22)
        return self._font

    def window_size(self, grid_size: int) -> Tuple[int, int]:
        board = grid_size * (self.cell_size + self.gap) - self.gap
        return board + self.margin * 2, board + self.margin * 2 + self.top_bar

    def cell_rect(self, x: int, y: int) -> pygame.Rect:
        step = self.cell_size + self.gap
        return pygame.Rect(self.margin + x * step, self.top_bar + self.margin + y * step,
                           self.cell_size, self.cell_size)

    def cell_at(self, px: int, py: int) -> Optional[Tuple[int, int]]:
        step = self.cell_size + self.gap
        x = (px - self.margin) // step
        y = (py - self.top_bar - self.margin) // step
        return int(x), int(y)

    def _draw_piece(self, screen: pygame.Surface, piece, hinted: bool) -> None:
        color = BOMB_COLOR if piece.is_bomb else VARIANT_COLORS[piece.variant % len(VARIANT_COLORS)]
        head = self.cell_rect(*round_cell(*piece.head))
        tail = self.cell_rect(*round_cell(*piece.tail))
        body = head.union(tail)
        pygame.draw.rect(screen, _shade(color, 0.8), body, border_radius=8)
        pygame.draw.rect(screen, color, head, border_radius=8)
        # nose marker towards the direction of travel
        dx, dy = piece.direction.delta
        nose = head.center[0] + dx * self.cell_size // 3, head.center[1] + dy * self.cell_size // 3
        pygame.draw.circle(screen, (30, 30, 30), nose, 4)
        if piece.is_bomb and piece.timer is not None:
            txt = self.font.render(f"{piece.timer}s", True, (255, 255, 255))
            screen.blit(txt, txt.get_rect(center=tail.center))
        if hinted:
            pygame.draw.rect(screen, HINT_COLOR, body.inflate(4, 4), 3, border_radius=10)

    def draw(self, screen: pygame.Surface, game: EscapeGame, toast: Optional[str] = None) -> None:
        screen.fill((134, 200, 140))
        size = game.grid_size
        for y in range(size):
            for x in range(size):
                pygame.draw.rect(screen, (110, 175, 118), self.cell_rect(x, y), border_radius=6)
        for piece in game.active:
            self._draw_piece(screen, piece, hinted=piece.id == game.hint_id)

        status = f"Level {game.level}   Pieces {len(game.active)}"
        if game.tool is Tool.REMOVE:
            status += "   [REMOVE]"
        if game.paused:
            status += "   PAUSED"
        screen.blit(self.font.render(status, True, (20, 40, 20)), (self.margin, 12))

        overlay = None
        if game.state is GameState.WON:
            overlay = f"{game.praise}  {game.level_duration:.1f}s - Enter for next level"
        elif game.state is GameState.LOST:
            overlay = "A bomb went off! R to retry"
        elif game.state is GameState.START_MENU:
            overlay = f"Level {game.level} - Enter to play, Esc to quit"
        elif toast:
            overlay = toast
        if overlay:
            img = self.font.render(overlay, True, (255, 255, 255))
            rect = img.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
            pygame.draw.rect(screen, (40, 40, 48), rect.inflate(24, 16), border_radius=8)
            screen.blit(img, rect)
        pygame.display.flip()
