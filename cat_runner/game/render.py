# cat_runner/game/render.py
from __future__ import annotations
import math
from typing import List, Optional, Protocol, Sequence, Tuple
import pygame

from .config import (
    WIDTH, HEIGHT, GROUND_Y,
    COLOR_BG, COLOR_FG, COLOR_MUTED, COLOR_GROUND, COLOR_GROUND_DASH, COLOR_CLOUD,
    COLOR_OBSTACLE, COLOR_CAT_BODY, COLOR_CAT_HEAD, COLOR_CAT_ACCENT,
    COLOR_CAT_LIGHT, COLOR_CAT_EYE, COLOR_CAT_DARK, COLOR_PANEL, COLOR_PANEL_EDGE
)
from .obstacles import Obstacle
from .player import Box


class Presenter(Protocol):
    """What the simulation needs from whoever draws it."""

    def draw_scene(self, cat_box: Box, obstacles: Sequence[Obstacle], fx_time_ms: float) -> None:
        ...

    def set_score(self, score: int) -> None:
        ...

    def set_best(self, best: int) -> None:
        ...

    def set_overlay(self, title: str, message: str, visible: bool) -> None:
        ...


class NullPresenter:
    """Headless presenter: keeps the latest values, draws nothing."""

    def __init__(self):
        self.frames = 0
        self.cat_box: Optional[Box] = None
        self.obstacles: List[Box] = []
        self.fx_time_ms = 0.0
        self.score = 0
        self.best = 0
        self.overlay: Tuple[str, str, bool] = ("", "", False)

    def draw_scene(self, cat_box, obstacles, fx_time_ms):
        self.frames += 1
        self.cat_box = cat_box
        self.obstacles = [ob.box for ob in obstacles]
        self.fx_time_ms = fx_time_ms

    def set_score(self, score):
        self.score = score

    def set_best(self, best):
        self.best = best

    def set_overlay(self, title, message, visible):
        self.overlay = (title, message, visible)


class PygameRenderer:
    """
    Procedural pygame drawing of the scene, HUD and end-of-run panel.
    Everything animated is a function of fx_time_ms (simulation time).
    """

    def __init__(self, surf: pygame.Surface, font: Optional[pygame.font.Font] = None,
                 small_font: Optional[pygame.font.Font] = None):
        self.surf = surf
        self.font = font or pygame.font.SysFont("jetbrainsmono", 22)
        self.small_font = small_font or pygame.font.SysFont("jetbrainsmono", 16)
        self.score = 0
        self.best = 0
        self.overlay_title = ""
        self.overlay_message = ""
        self.overlay_visible = False

    # -------------------- Presenter API --------------------

    def set_score(self, score: int) -> None:
        self.score = int(score)

    def set_best(self, best: int) -> None:
        self.best = int(best)

    def set_overlay(self, title: str, message: str, visible: bool) -> None:
        self.overlay_title = title
        self.overlay_message = message
        self.overlay_visible = visible

    def draw_scene(self, cat_box: Box, obstacles: Sequence[Obstacle], fx_time_ms: float) -> None:
        self.surf.fill(COLOR_BG)
        self._draw_clouds(fx_time_ms)
        self._draw_ground()
        self._draw_cat(cat_box, fx_time_ms)
        self._draw_obstacles(obstacles)
        self._draw_hud()
        if self.overlay_visible:
            self._draw_overlay()

    # -------------------- Pieces --------------------

    def _draw_clouds(self, fx_time_ms: float):
        layer = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
        color = (*COLOR_CLOUD, 64)
        t = (fx_time_ms / 1000.0) * 0.2
        offset = (t * 40) % (WIDTH + 200)

        def cloud(base_x, base_y, scale):
            pygame.draw.circle(layer, color, (int(base_x), int(base_y)), int(12 * scale))
            pygame.draw.circle(layer, color, (int(base_x + 10 * scale), int(base_y - 12 * scale)), int(14 * scale))
            pygame.draw.circle(layer, color, (int(base_x + 20 * scale), int(base_y)), int(12 * scale))

        cloud(WIDTH - offset, 60, 1.0)
        cloud(WIDTH + 140 - offset, 40, 0.8)
        cloud(WIDTH + 280 - offset, 70, 1.1)
        self.surf.blit(layer, (0, 0))

    def _draw_ground(self):
        pygame.draw.line(self.surf, COLOR_GROUND, (0, GROUND_Y), (WIDTH, GROUND_Y), 2)
        for x in range(0, WIDTH, 30):
            pygame.draw.line(self.surf, COLOR_GROUND_DASH, (x, GROUND_Y + 6), (x + 15, GROUND_Y + 6), 1)

    def _draw_cat(self, cat_box: Box, fx_time_ms: float):
        x, y, w, h = (int(v) for v in cat_box)
        # body, head
        pygame.draw.rect(self.surf, COLOR_CAT_DARK, (x - 4, y + 2, w + 8, h - 4), border_radius=10)
        pygame.draw.rect(self.surf, COLOR_CAT_BODY, (x + 2, y + 10, w - 4, h - 10), border_radius=8)
        pygame.draw.rect(self.surf, COLOR_CAT_HEAD, (x + 4, y - 6, 28, 26), border_radius=8)
        # ears
        for ex in (8, 22):
            pygame.draw.polygon(self.surf, COLOR_CAT_BODY,
                                ((x + ex, y - 4), (x + ex + 5, y - 18), (x + ex + 10, y - 4)))
            pygame.draw.polygon(self.surf, COLOR_CAT_LIGHT,
                                ((x + ex + 3, y - 6), (x + ex + 5, y - 14), (x + ex + 7, y - 6)))
        # tail
        pygame.draw.rect(self.surf, COLOR_CAT_ACCENT, (x + w - 4, y + 16, 16, 6), border_radius=3)
        pygame.draw.rect(self.surf, COLOR_CAT_LIGHT, (x + w - 1, y + 17, 8, 3), border_radius=2)
        # eyes pulse with simulation time
        pulse = 0.6 + 0.4 * math.sin(fx_time_ms / 180.0)
        for ex in (13, 22):
            pygame.draw.circle(self.surf, COLOR_CAT_DARK, (x + ex, y + 3), 3)
            pygame.draw.circle(self.surf, COLOR_CAT_EYE, (x + ex, y + 3), max(1, round(1.6 + pulse * 0.4)))
        # nose, jaw
        pygame.draw.rect(self.surf, COLOR_CAT_LIGHT, (x + 15, y + 8, 4, 2))
        pygame.draw.line(self.surf, COLOR_MUTED, (x + 13, y + 11), (x + 21, y + 11), 1)

    def _draw_obstacles(self, obstacles: Sequence[Obstacle]):
        for ob in obstacles:
            pygame.draw.rect(self.surf, COLOR_OBSTACLE, ob.rect, border_radius=4)

    def _draw_hud(self):
        hud = f"Score: {self.score}   Best: {self.best}"
        txt = self.font.render(hud, True, COLOR_FG)
        self.surf.blit(txt, (WIDTH - txt.get_width() - 12, 10))

    def _draw_overlay(self):
        panel_w, panel_h = 460, 110
        panel_rect = pygame.Rect((WIDTH - panel_w) // 2, (HEIGHT - panel_h) // 2 - 20, panel_w, panel_h)
        panel = pygame.Surface(panel_rect.size, pygame.SRCALPHA)
        panel.fill((*COLOR_PANEL, 220))
        self.surf.blit(panel, panel_rect.topleft)
        pygame.draw.rect(self.surf, COLOR_PANEL_EDGE, panel_rect, width=2, border_radius=10)

        title = self.font.render(self.overlay_title, True, COLOR_FG)
        self.surf.blit(title, (panel_rect.centerx - title.get_width() // 2, panel_rect.top + 14))
        y0 = panel_rect.top + 50
        for li, line in enumerate(self.overlay_message.split("\n")):
            msg = self.small_font.render(line, True, COLOR_MUTED)
            self.surf.blit(msg, (panel_rect.centerx - msg.get_width() // 2, y0 + li * 20))
