# sidescroller/game/painter.py
from __future__ import annotations
from typing import Iterable, Optional
import pygame

from .config import (
    WIDTH, HEIGHT,
    COLOR_SKY_TOP, COLOR_SKY_BOTTOM, COLOR_HUD_PANEL, COLOR_OVERLAY,
    COLOR_WHITE, COLOR_GOLD, COLOR_DANGER, COLOR_VICTORY, COLOR_HEART, COLOR_HEALTH_EMPTY,
)
from .draw import DrawCommand, Shape
from .world import Game, GameState, Hud


def draw_command(surf: pygame.Surface, cmd: DrawCommand) -> None:
    """Rasterise one DrawCommand onto a pygame surface."""
    if cmd.shape is Shape.RECT:
        if cmd.rotation:
            pygame.draw.polygon(surf, cmd.color, cmd.corners(), cmd.width)
        else:
            pygame.draw.rect(surf, cmd.color, pygame.Rect(round(cmd.x), round(cmd.y), round(cmd.w), round(cmd.h)), cmd.width)
    elif cmd.shape is Shape.CIRCLE:
        pygame.draw.circle(surf, cmd.color, (round(cmd.x), round(cmd.y)), round(cmd.radius), cmd.width)
    elif cmd.shape is Shape.POLYGON:
        pygame.draw.polygon(surf, cmd.color, cmd.points, cmd.width)
    elif cmd.shape is Shape.LINE:
        a, b = cmd.points[0], cmd.points[1]
        pygame.draw.line(surf, cmd.color, a, b, max(1, cmd.width))
    elif cmd.shape is Shape.ARC:
        box = pygame.Rect(round(cmd.x), round(cmd.y), round(cmd.w), round(cmd.h))
        pygame.draw.arc(surf, cmd.color, box, cmd.start_angle, cmd.stop_angle, max(1, cmd.width))


def is_translucent(cmd: DrawCommand) -> bool:
    return len(cmd.color) == 4 and cmd.color[3] < 255


class Painter:
    """Draws the game world, HUD and end screens. Reads the Game; never mutates it."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        if not pygame.font.get_init():
            pygame.font.init()
        self.width = width
        self.height = height
        self.font = pygame.font.SysFont("jetbrainsmono", 18)
        self.font_big = pygame.font.SysFont("jetbrainsmono", 56, bold=True)
        self.font_mid = pygame.font.SysFont("jetbrainsmono", 28)
        self._sky = self._make_sky()
        self._overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        self._overlay.fill(COLOR_OVERLAY)
        self._layer = pygame.Surface((width, height), pygame.SRCALPHA)

    def _make_sky(self) -> pygame.Surface:
        sky = pygame.Surface((self.width, self.height))
        (r0, g0, b0), (r1, g1, b1) = COLOR_SKY_TOP, COLOR_SKY_BOTTOM
        for y in range(self.height):
            t = y / max(1, self.height - 1)
            color = (int(r0 + (r1 - r0) * t), int(g0 + (g1 - g0) * t), int(b0 + (b1 - b0) * t))
            pygame.draw.line(sky, color, (0, y), (self.width, y))
        return sky

    def draw(self, surf: pygame.Surface, game: Game) -> None:
        surf.blit(self._sky, (0, 0))
        self.draw_commands(surf, game.draw_commands())
        hud = game.hud()
        self.draw_hud(surf, hud)
        if hud.state is GameState.GAME_OVER:
            self.draw_end_screen(surf, "GAME OVER", COLOR_DANGER, hud, "Press R to Restart")
        elif hud.state is GameState.GAME_WON:
            self.draw_end_screen(surf, "VICTORY!", COLOR_VICTORY, hud, "Press R to Play Again")
        elif hud.state is GameState.PAUSED:
            self._center_text(surf, "PAUSED (P to resume)", self.font_mid, COLOR_WHITE, self.height // 2)

    def draw_commands(self, surf: pygame.Surface, cmds: Iterable[DrawCommand]) -> None:
        """Runs of translucent commands go through one SRCALPHA layer, blitted in order."""
        pending = False
        for cmd in cmds:
            if is_translucent(cmd):
                if not pending:
                    self._layer.fill((0, 0, 0, 0))
                    pending = True
                draw_command(self._layer, cmd)
                continue
            if pending:
                surf.blit(self._layer, (0, 0))
                pending = False
            draw_command(surf, cmd)
        if pending:
            surf.blit(self._layer, (0, 0))

    def draw_hud(self, surf: pygame.Surface, hud: Hud) -> None:
        panel = pygame.Surface((280, 110), pygame.SRCALPHA)
        panel.fill(COLOR_HUD_PANEL)
        surf.blit(panel, (10, 10))
        surf.blit(self.font_mid.render(f"Score: {hud.score}", True, COLOR_GOLD), (20, 16))
        surf.blit(self.font.render(f"High Score: {hud.high_score}", True, COLOR_WHITE), (20, 52))
        surf.blit(self.font.render(f"Progress: {hud.progress}%", True, COLOR_WHITE), (20, 72))
        for i in range(hud.max_health):
            color = COLOR_HEART if i < hud.health else COLOR_HEALTH_EMPTY
            pygame.draw.circle(surf, color, (30 + i * 24, 104), 8)

        hint = pygame.Surface((320, 80), pygame.SRCALPHA)
        hint.fill(COLOR_HUD_PANEL)
        surf.blit(hint, (10, self.height - 90))
        surf.blit(self.font.render("LEFT / RIGHT to move", True, COLOR_WHITE), (20, self.height - 82))
        surf.blit(self.font.render("UP or SPACE to jump, P pause", True, COLOR_WHITE), (20, self.height - 60))
        color = COLOR_GOLD if hud.double_jump_unlocked else COLOR_WHITE
        surf.blit(self.font.render(hud.hint, True, color), (20, self.height - 38))

    def draw_end_screen(self, surf: pygame.Surface, title: str, title_color, hud: Hud,
                        restart_hint: str) -> None:
        surf.blit(self._overlay, (0, 0))
        mid = self.height // 2
        self._center_text(surf, title, self.font_big, title_color, mid - 50)
        self._center_text(surf, f"Final Score: {hud.score}", self.font_mid, COLOR_WHITE, mid + 20)
        if hud.new_high_score:
            self._center_text(surf, "NEW HIGH SCORE!", self.font_mid, COLOR_GOLD, mid + 60)
        self._center_text(surf, restart_hint, self.font, COLOR_WHITE, mid + 100)

    def _center_text(self, surf: pygame.Surface, text: str, font: pygame.font.Font,
                     color, y: int) -> None:
        img = font.render(text, True, color)
        surf.blit(img, (self.width // 2 - img.get_width() // 2, y - img.get_height() // 2))


def render_frame(game: Game, painter: Optional[Painter] = None) -> pygame.Surface:
    """Off-screen render of the current frame (no window needed)."""
    painter = painter or Painter()
    surf = pygame.Surface((painter.width, painter.height))
    painter.draw(surf, game)
    return surf
