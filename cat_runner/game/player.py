# cat_runner/game/player.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from typing import Tuple
from .config import (
    CAT_X, CAT_W, CAT_H, GRAVITY, JUMP_FORCE, GROUND_Y
)

Box = Tuple[float, float, float, float]   # (x, y, width, height), top-left based


@dataclass
class Cat:
    """
    Runner with a fixed x and single-axis vertical motion:
    - y is the TOP of the box, screen coordinates (down is positive)
    - gravity and the jump impulse are applied once per tick, not scaled by dt
    """
    x: float = float(CAT_X)
    y: float = float(GROUND_Y - CAT_H)
    width: float = float(CAT_W)
    height: float = float(CAT_H)
    vy: float = 0.0
    grounded: bool = True
    ground_y: float = float(GROUND_Y)
    gravity: float = GRAVITY
    jump_force: float = JUMP_FORCE

    @property
    def box(self) -> Box:
        return (self.x, self.y, self.width, self.height)

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def reset(self):
        """Put the cat back on the ground line, at rest."""
        self.y = self.ground_y - self.height
        self.vy = 0.0
        self.grounded = True

    def try_jump(self) -> bool:
        """Jump only if grounded. Returns True if performed."""
        if not self.grounded:
            return False
        self.vy = -self.jump_force
        self.grounded = False
        return True

    def update_physics(self):
        """Integrate one tick of vertical motion, then clamp to the ground line."""
        self.vy += self.gravity
        self.y += self.vy

        if self.y + self.height >= self.ground_y:
            self.y = self.ground_y - self.height
            self.vy = 0.0
            self.grounded = True
        else:
            self.grounded = False
