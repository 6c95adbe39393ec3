# cat_runner/game/obstacles.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import pygame
from .config import (
    WIDTH, GROUND_Y, REFERENCE_FRAME_MS, OBSTACLE_PROFILES, TALL_CHANCE,
    SPAWN_OFFSET_X, DESPAWN_X, SPAWN_MIN_MS, SPAWN_MAX_MS
)
from .player import Box


@dataclass
class Obstacle:
    """A block standing on the ground line, scrolling left."""
    x: float
    y: float
    width: float
    height: float
    profile: str = "low"   # "low" or "tall"

    @property
    def box(self) -> Box:
        return (self.x, self.y, self.width, self.height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))


def boxes_overlap(a: Box, b: Box) -> bool:
    """AABB overlap with closed intervals: touching edges count as a hit."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return not (
        ax + aw < bx or
        ax > bx + bw or
        ay + ah < by or
        ay > by + bh
    )


def first_collision(box: Box, obstacles: Sequence[Obstacle]) -> Optional[Obstacle]:
    """First obstacle (spawn order) overlapping `box`, or None."""
    for ob in obstacles:
        if boxes_overlap(box, ob.box):
            return ob
    return None


def advance_obstacles(obstacles: List[Obstacle], speed: float, delta_ms: float,
                      despawn_x: float = DESPAWN_X) -> List[Obstacle]:
    """
    Scroll every obstacle left by `speed` per reference frame, scaled by
    delta_ms, and drop the ones that left the playfield. Order is preserved.
    """
    move = speed * (delta_ms / REFERENCE_FRAME_MS)
    for ob in obstacles:
        ob.x -= move
    return [ob for ob in obstacles if ob.right > despawn_x]


class Spawner:
    """
    Countdown spawner. When the timer runs out, one obstacle is placed just
    past the right edge and the timer is re-armed to a random interval.
    """
    def __init__(self, rng: random.Random, playfield_w: float = WIDTH,
                 ground_y: float = GROUND_Y):
        self.rng = rng
        self.playfield_w = playfield_w
        self.ground_y = ground_y
        self.timer = 0.0

    def reset(self):
        self.timer = 0.0

    def next_interval(self) -> float:
        return self.rng.uniform(SPAWN_MIN_MS, SPAWN_MAX_MS)

    def pick_profile(self) -> Tuple[str, Tuple[int, int]]:
        name = "tall" if self.rng.random() < TALL_CHANCE else "low"
        return name, OBSTACLE_PROFILES[name]

    def make_obstacle(self) -> Obstacle:
        name, (w, h) = self.pick_profile()
        return Obstacle(
            x=float(self.playfield_w + SPAWN_OFFSET_X),
            y=float(self.ground_y - h),
            width=float(w),
            height=float(h),
            profile=name,
        )

    def update(self, delta_ms: float, obstacles: List[Obstacle]) -> Optional[Obstacle]:
        """Count down and append at most one obstacle. Returns it, if any."""
        self.timer -= delta_ms
        if self.timer > 0:
            return None
        ob = self.make_obstacle()
        obstacles.append(ob)
        self.timer = self.next_interval()
        return ob
