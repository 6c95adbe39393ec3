# cat_runner/tests/sim_tests.py
"""
State machine, scoring/difficulty and end-of-run behaviour of Simulation.

Usage (from repo root):
  python -m cat_runner.tests.sim_tests
"""
from __future__ import annotations
import math
import random
import tempfile
from pathlib import Path

from cat_runner.game.config import (
    BASE_SPEED, MAX_SPEED, GROUND_Y, CAT_H, REFERENCE_FRAME_MS, READY_TITLE, OVER_TITLE
)
from cat_runner.game.obstacles import Obstacle
from cat_runner.game.render import NullPresenter
from cat_runner.game.sim import GameState, Intent, Simulation
from cat_runner.game.storage import JsonBestScoreStore, MemoryBestScoreStore

FRAME = REFERENCE_FRAME_MS


def make_sim(best: int = 0, seed: int = 1234):
    presenter = NullPresenter()
    store = MemoryBestScoreStore(best)
    sim = Simulation(presenter=presenter, store=store, seed=seed)
    return sim, presenter, store


def block_on_cat(sim) -> Obstacle:
    cat = sim.cat
    return Obstacle(x=cat.x, y=cat.y, width=cat.width, height=cat.height)


def test_starts_idle_and_renders_ready_frame():
    sim, presenter, _ = make_sim()
    assert sim.state is GameState.IDLE
    sim.render_idle()
    assert presenter.frames == 1
    assert presenter.overlay[0] == READY_TITLE and presenter.overlay[2]


def test_scenario_start_without_ticks():
    sim, presenter, _ = make_sim()
    assert sim.start()
    assert sim.state is GameState.RUNNING
    assert sim.ctx.score == 0 and sim.ctx.speed == BASE_SPEED
    assert sim.cat.grounded and sim.obstacles == []
    assert presenter.overlay[2] is False


def test_idle_ignores_jump_and_steps():
    sim, presenter, _ = make_sim()
    y = sim.cat.y
    assert not sim.jump()
    assert not sim.step(FRAME)
    assert sim.state is GameState.IDLE
    assert sim.cat.y == y and presenter.frames == 0


def test_over_ignores_jump():
    sim, _, _ = make_sim()
    sim.start()
    sim.ctx.obstacles.append(block_on_cat(sim))
    sim.step(FRAME)
    assert sim.state is GameState.OVER
    y, vy, grounded = sim.cat.y, sim.cat.vy, sim.cat.grounded
    assert not sim.jump()
    assert not sim.handle(Intent.JUMP)
    assert sim.state is GameState.OVER
    assert (sim.cat.y, sim.cat.vy, sim.cat.grounded) == (y, vy, grounded)


def test_start_ignored_while_running():
    sim, _, _ = make_sim()
    sim.start()
    sim.spawner.timer = 1e12
    for _ in range(30):
        sim.step(FRAME)
    score = sim.ctx.score
    assert not sim.start()
    assert sim.ctx.score == score


def test_scenario_jump_tick():
    sim, _, _ = make_sim()
    sim.start()
    y0 = sim.cat.y
    assert sim.handle(Intent.JUMP)
    sim.step(FRAME)
    assert math.isclose(sim.cat.vy, -14.1)
    assert math.isclose(y0 - sim.cat.y, 14.1)


def test_primary_intent_starts_then_jumps():
    sim, _, _ = make_sim()
    assert sim.handle(Intent.PRIMARY)
    assert sim.state is GameState.RUNNING
    assert sim.handle(Intent.PRIMARY)
    assert not sim.cat.grounded


def test_first_tick_spawns_one_obstacle():
    sim, _, _ = make_sim()
    sim.start()
    sim.step(FRAME)
    assert len(sim.obstacles) == 1
    assert 600.0 < sim.spawner.timer < 1300.0


def test_scenario_spawn_timer():
    sim, _, _ = make_sim()
    sim.start()
    sim.spawner.timer = 50.0
    sim.step(100.0)
    assert len(sim.obstacles) == 1
    assert 700.0 <= sim.spawner.timer < 1300.0


def test_score_and_speed_monotone_and_capped():
    sim, presenter, _ = make_sim()
    sim.start()
    sim.spawner.timer = 1e12
    rng = random.Random(9)
    prev_score, prev_speed = sim.ctx.score, sim.ctx.speed
    for _ in range(3000):
        if rng.random() < 0.1:
            sim.jump()
        assert sim.step(rng.uniform(5.0, 40.0))
        assert sim.ctx.score >= prev_score
        assert sim.ctx.speed >= prev_speed
        assert sim.ctx.speed <= MAX_SPEED
        assert sim.cat.y + sim.cat.height <= GROUND_Y + 1e-9
        prev_score, prev_speed = sim.ctx.score, sim.ctx.speed
    assert sim.ctx.speed == MAX_SPEED
    assert presenter.score == math.floor(sim.ctx.score)


def test_score_rate():
    sim, _, _ = make_sim()
    sim.start()
    sim.spawner.timer = 1e12
    for _ in range(60):
        sim.step(FRAME)
    # ~20 points per second, speed +0.0005 per ms
    assert math.isclose(sim.ctx.score, 60 * FRAME * 0.02)
    assert math.isclose(sim.ctx.speed, BASE_SPEED + 60 * FRAME * 0.0005)


def test_scenario_collision_sets_best():
    sim, presenter, store = make_sim(best=10)
    sim.start()
    sim.ctx.score = 42.0
    sim.ctx.obstacles.append(block_on_cat(sim))
    assert not sim.step(FRAME)
    assert sim.state is GameState.OVER
    assert sim.best == 42 and store.value == 42 and store.writes == 1
    assert presenter.best == 42
    title, message, visible = presenter.overlay
    assert title == OVER_TITLE and "42" in message and visible

    # halted: further ticks change nothing
    frames, y, obstacles = presenter.frames, sim.cat.y, [o.x for o in sim.obstacles]
    assert not sim.step(FRAME)
    assert not sim.tick(99999.0)
    assert presenter.frames == frames and sim.cat.y == y
    assert [o.x for o in sim.obstacles] == obstacles


def test_collision_below_best_keeps_it():
    sim, _, store = make_sim(best=500)
    sim.start()
    sim.ctx.score = 42.0
    sim.ctx.obstacles.append(block_on_cat(sim))
    sim.step(FRAME)
    assert sim.state is GameState.OVER
    assert sim.best == 500 and store.writes == 0


def test_edge_touch_is_a_hit():
    sim, _, _ = make_sim()
    sim.start()
    sim.spawner.timer = 1e12
    cat = sim.cat
    # after this tick's scroll (6 units) its left edge touches the cat's right edge
    sim.ctx.obstacles.append(Obstacle(x=cat.x + cat.width + 6.0, y=GROUND_Y - 40.0,
                                      width=22.0, height=40.0))
    sim.step(FRAME)
    assert sim.state is GameState.OVER


def test_jumping_clears_a_low_obstacle():
    sim, _, _ = make_sim()
    sim.start()
    sim.spawner.timer = 1e12
    sim.ctx.obstacles.append(Obstacle(x=sim.cat.x + 130.0, y=GROUND_Y - 40.0,
                                      width=22.0, height=40.0, profile="low"))
    sim.jump()
    for _ in range(60):
        assert sim.step(FRAME), "cat should have jumped over the block"


def test_scenario_restart_resets_everything():
    sim, presenter, _ = make_sim()
    sim.start()
    for _ in range(5):
        sim.step(FRAME)
    sim.jump()
    sim.step(FRAME)
    sim.ctx.obstacles.append(block_on_cat(sim))
    sim.step(FRAME)
    assert sim.state is GameState.OVER

    assert sim.handle(Intent.RESTART)
    assert sim.state is GameState.RUNNING
    assert sim.ctx.score == 0 and sim.ctx.speed == BASE_SPEED
    assert sim.obstacles == []
    assert sim.cat.grounded and sim.cat.vy == 0.0
    assert sim.cat.y == GROUND_Y - CAT_H
    assert presenter.score == 0 and presenter.overlay[2] is False


def test_tick_uses_timestamp_delta():
    sim, _, _ = make_sim()
    sim.start()
    sim.spawner.timer = 1e12
    sim.tick(1000.0)            # first tick: nominal frame
    sim.tick(1000.0)            # zero delta falls back to a nominal frame
    sim.tick(1050.0)
    assert math.isclose(sim.ctx.elapsed_ms, FRAME + FRAME + 50.0)


def test_negative_delta_rejected():
    sim, _, _ = make_sim()
    sim.start()
    try:
        sim.step(-1.0)
    except ValueError:
        pass
    else:
        raise AssertionError("negative delta accepted")


def test_best_score_survives_sessions():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "scores.json"
        sim = Simulation(store=JsonBestScoreStore(path), seed=3)
        assert sim.best == 0
        sim.start()
        sim.ctx.score = 42.7
        sim.ctx.obstacles.append(block_on_cat(sim))
        sim.step(FRAME)
        assert sim.best == 43   # floor(42.7 + one frame of score)

        again = Simulation(store=JsonBestScoreStore(path), seed=4)
        assert again.best == 43


def test_instances_are_independent():
    a, _, _ = make_sim(seed=1)
    b, _, _ = make_sim(seed=1)
    a.start()
    b.start()
    for _ in range(10):
        a.step(FRAME)
    assert b.ctx.score == 0 and b.obstacles == []
    b_steps = [b.step(FRAME) for _ in range(10)]
    assert all(b_steps)
    assert [o.box for o in a.obstacles] == [o.box for o in b.obstacles]


def main():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
    print("✓ sim tests passed")


if __name__ == "__main__":
    main()
