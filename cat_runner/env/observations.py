# cat_runner/env/observations.py
from __future__ import annotations
from typing import Optional
import numpy as np

from cat_runner.game.config import (
    WIDTH, GROUND_Y, CAT_H, JUMP_FORCE, BASE_SPEED, MAX_SPEED, SPAWN_OFFSET_X
)
from cat_runner.game.obstacles import Obstacle

OBS_SIZE = 6


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def _norm_height(cat) -> float:
    """Height of the cat's feet above the ground, 0 on the ground, 1 near the top."""
    denom = max(1.0, GROUND_Y - CAT_H)
    return _clamp01((GROUND_Y - (cat.y + cat.height)) / denom)


def _norm_vy(vy: float, vy_max: float = JUMP_FORCE) -> float:
    """Clip vy to [-vy_max, vy_max] and scale to [-1,1]."""
    vy_max = float(max(1.0, vy_max))
    vv = max(-vy_max, min(vy, vy_max))
    return vv / vy_max


def next_obstacle(cat, obstacles) -> Optional[Obstacle]:
    """Nearest obstacle whose right edge is still ahead of the cat's left edge."""
    for ob in obstacles:   # spawn order == left-to-right order
        if ob.right >= cat.x:
            return ob
    return None


def build_observation(sim) -> np.ndarray:
    """
    Returns a fixed (6,) float32 vector:
      [ height_norm, vy_norm, grounded, speed_norm, next_dx_norm, next_tall ]
    - height_norm  in [0,1]   (0 = standing on the ground)
    - vy_norm      in [-1,1]
    - grounded     in {0,1}
    - speed_norm   in [0,1]   (BASE_SPEED -> 0, MAX_SPEED -> 1)
    - next_dx_norm in [0,1]   gap to the next obstacle; 1.0 sentinel if none
    - next_tall    in {0,1}
    """
    cat = sim.cat
    speed_norm = _clamp01((sim.ctx.speed - BASE_SPEED) / (MAX_SPEED - BASE_SPEED))

    ob = next_obstacle(cat, sim.obstacles)
    if ob is None:
        dx_norm, tall = 1.0, 0.0
    else:
        gap = ob.x - (cat.x + cat.width)
        dx_norm = _clamp01(gap / float(WIDTH + SPAWN_OFFSET_X))
        tall = 1.0 if ob.profile == "tall" else 0.0

    feats = [
        _norm_height(cat),
        _norm_vy(float(cat.vy)),
        1.0 if cat.grounded else 0.0,
        speed_norm,
        dx_norm,
        tall,
    ]
    return np.asarray(feats, dtype=np.float32)
