# cat_runner/tests/physics_tests.py
"""
Cat physics, obstacle scrolling and AABB collision checks.

Usage (from repo root):
  python -m cat_runner.tests.physics_tests
  pytest cat_runner/tests/physics_tests.py
"""
from __future__ import annotations
import math
import random

from cat_runner.game.config import GROUND_Y, CAT_H, GRAVITY, JUMP_FORCE, REFERENCE_FRAME_MS
from cat_runner.game.obstacles import Obstacle, advance_obstacles, boxes_overlap, first_collision
from cat_runner.game.player import Cat


def grounded_cat() -> Cat:
    cat = Cat()
    cat.reset()
    return cat


def test_reset_puts_cat_on_ground():
    cat = Cat(y=10.0, vy=-3.0, grounded=False)
    cat.reset()
    assert cat.y == GROUND_Y - CAT_H
    assert cat.vy == 0.0 and cat.grounded


def test_jump_then_tick():
    """Jump from the ground: vy = -15 + 0.9 after one tick, y rises by 14.1."""
    cat = grounded_cat()
    y0 = cat.y
    assert cat.try_jump()
    assert cat.vy == -JUMP_FORCE and not cat.grounded
    cat.update_physics()
    assert math.isclose(cat.vy, -JUMP_FORCE + GRAVITY)
    assert math.isclose(cat.vy, -14.1)
    assert math.isclose(y0 - cat.y, 14.1)
    assert not cat.grounded


def test_jump_is_noop_while_airborne():
    cat = grounded_cat()
    cat.try_jump()
    cat.update_physics()
    vy, y = cat.vy, cat.y
    assert not cat.try_jump()
    assert cat.vy == vy and cat.y == y


def test_idle_tick_stays_grounded():
    cat = grounded_cat()
    cat.update_physics()
    assert cat.grounded and cat.vy == 0.0
    assert cat.y + cat.height == GROUND_Y


def test_never_sinks_below_ground():
    rng = random.Random(7)
    cat = grounded_cat()
    for _ in range(2000):
        if rng.random() < 0.2:
            cat.try_jump()
        cat.update_physics()
        assert cat.y + cat.height <= GROUND_Y + 1e-9
    # a full jump comes back down and lands
    cat.try_jump()
    for _ in range(100):
        cat.update_physics()
    assert cat.grounded and cat.vy == 0.0


def test_boxes_overlap_closed_edges():
    a = (0.0, 0.0, 10.0, 10.0)
    assert boxes_overlap(a, (5.0, 5.0, 10.0, 10.0))
    assert boxes_overlap(a, (10.0, 0.0, 5.0, 5.0))     # touching right edge
    assert boxes_overlap(a, (0.0, 10.0, 5.0, 5.0))     # touching bottom edge
    assert not boxes_overlap(a, (10.5, 0.0, 5.0, 5.0))
    assert not boxes_overlap(a, (-6.0, 0.0, 5.0, 5.0))
    assert not boxes_overlap(a, (0.0, -5.5, 5.0, 5.0))


def test_advance_scales_with_delta():
    obs = [Obstacle(x=500.0, y=0.0, width=22.0, height=40.0)]
    obs = advance_obstacles(obs, speed=6.0, delta_ms=REFERENCE_FRAME_MS)
    assert math.isclose(obs[0].x, 494.0)
    obs = advance_obstacles(obs, speed=6.0, delta_ms=2 * REFERENCE_FRAME_MS)
    assert math.isclose(obs[0].x, 482.0)


def test_prune_keeps_order():
    obs = [
        Obstacle(x=-42.0, y=0.0, width=22.0, height=40.0),   # right edge lands at -20 -> dropped
        Obstacle(x=-30.0, y=0.0, width=28.0, height=60.0),   # right edge -2 -> kept
        Obstacle(x=100.0, y=0.0, width=22.0, height=40.0),
        Obstacle(x=300.0, y=0.0, width=28.0, height=60.0),
    ]
    kept = advance_obstacles(obs, speed=0.0, delta_ms=REFERENCE_FRAME_MS)
    assert [o.x for o in kept] == [-30.0, 100.0, 300.0]


def test_first_collision_uses_spawn_order():
    cat = grounded_cat()
    a = Obstacle(x=cat.x + 10, y=cat.y, width=22.0, height=40.0)
    b = Obstacle(x=cat.x, y=cat.y, width=22.0, height=40.0)
    far = Obstacle(x=600.0, y=cat.y, width=22.0, height=40.0)
    assert first_collision(cat.box, [far, a, b]) is a
    assert first_collision(cat.box, [far]) is None
    assert first_collision(cat.box, []) is None


def main():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
    print("✓ physics tests passed")


if __name__ == "__main__":
    main()
