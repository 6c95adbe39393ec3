# cat_runner/game/sim.py
"""
Run simulation and its idle -> running -> over state machine.

All run state lives in a RunContext owned by one Simulation, so several
simulations can run side by side (tests, vectorised envs). A frame driver
calls `tick(timestamp_ms)` (or `step(delta_ms)` directly) once per frame
while the state is RUNNING; each call applies physics, spawning, scoring
and the collision check, then renders once.
"""
from __future__ import annotations
import enum
import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional

from .config import (
    WIDTH, GROUND_Y, REFERENCE_FRAME_MS, BASE_SPEED, MAX_SPEED,
    ACCEL_PER_MS, SCORE_PER_MS, READY_TITLE, READY_MESSAGE, OVER_TITLE
)
from .obstacles import Obstacle, Spawner, advance_obstacles, first_collision
from .player import Cat
from .render import NullPresenter, Presenter
from .storage import BestScoreStore, MemoryBestScoreStore

logger = logging.getLogger(__name__)


class GameState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    OVER = "over"


class Intent(enum.Enum):
    START = "start"
    JUMP = "jump"
    RESTART = "restart"
    PRIMARY = "primary"   # space / up: start when not running, jump when running


@dataclass
class RunContext:
    """Everything a single run mutates."""
    cat: Cat = field(default_factory=Cat)
    obstacles: List[Obstacle] = field(default_factory=list)
    speed: float = BASE_SPEED
    score: float = 0.0
    elapsed_ms: float = 0.0

    @property
    def display_score(self) -> int:
        return int(math.floor(self.score))

    def reset(self):
        self.cat.reset()
        self.obstacles = []
        self.speed = BASE_SPEED
        self.score = 0.0
        self.elapsed_ms = 0.0

    def advance_score(self, delta_ms: float):
        """Score and speed grow with elapsed time; speed stops at MAX_SPEED."""
        self.score += delta_ms * SCORE_PER_MS
        if self.speed < MAX_SPEED:
            self.speed = min(MAX_SPEED, self.speed + delta_ms * ACCEL_PER_MS)


class Simulation:
    def __init__(self,
                 presenter: Optional[Presenter] = None,
                 store: Optional[BestScoreStore] = None,
                 seed: Optional[int] = None,
                 playfield_w: float = WIDTH,
                 ground_y: float = GROUND_Y):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.seed = seed
        self.rng = random.Random(seed)
        self.presenter: Presenter = presenter if presenter is not None else NullPresenter()
        self.store: BestScoreStore = store if store is not None else MemoryBestScoreStore()

        cat = Cat(ground_y=float(ground_y))
        cat.reset()
        self.ctx = RunContext(cat=cat)
        self.spawner = Spawner(self.rng, playfield_w=playfield_w, ground_y=ground_y)
        self.state = GameState.IDLE
        self.best = self.store.load_best_score()
        self.last_timestamp: Optional[float] = None
        self.presenter.set_best(self.best)

    # -------------------- Convenience views --------------------

    @property
    def cat(self) -> Cat:
        return self.ctx.cat

    @property
    def obstacles(self) -> List[Obstacle]:
        return self.ctx.obstacles

    @property
    def running(self) -> bool:
        return self.state is GameState.RUNNING

    # -------------------- Transitions --------------------

    def start(self) -> bool:
        """idle/over -> running. Ignored while already running."""
        if self.state is GameState.RUNNING:
            return False
        self.ctx.reset()
        self.spawner.reset()
        self.last_timestamp = None
        self.state = GameState.RUNNING
        self.presenter.set_score(0)
        self.presenter.set_overlay("", "", False)
        logger.info("Run started (seed=%s, best=%d)", self.seed, self.best)
        return True

    def restart(self) -> bool:
        return self.start()

    def jump(self) -> bool:
        """Jump while running; anything else is a no-op."""
        if self.state is not GameState.RUNNING:
            return False
        return self.cat.try_jump()

    def handle(self, intent: Intent) -> bool:
        if intent is Intent.JUMP:
            return self.jump()
        if intent in (Intent.START, Intent.RESTART):
            return self.start()
        if intent is Intent.PRIMARY:
            return self.jump() if self.running else self.start()
        return False

    def game_over(self):
        """running -> over: record the best score and surface the final one."""
        self.state = GameState.OVER
        final = self.ctx.display_score
        if final > self.best:
            self.best = final
            self.store.store_best_score(final)
            self.presenter.set_best(final)
            logger.info("Game over: score=%d (new best)", final)
        else:
            logger.info("Game over: score=%d (best=%d)", final, self.best)
        self.presenter.set_overlay(
            OVER_TITLE,
            f"Your score: {final}\nPress R or SPACE to play again",
            True,
        )

    # -------------------- Frame work --------------------

    def tick(self, timestamp_ms: float) -> bool:
        """Step by the time since the previous tick. Returns True while running."""
        if self.state is not GameState.RUNNING:
            return False
        if self.last_timestamp is None:
            delta = REFERENCE_FRAME_MS
        else:
            delta = (timestamp_ms - self.last_timestamp) or REFERENCE_FRAME_MS
        self.last_timestamp = timestamp_ms
        return self.step(delta)

    def step(self, delta_ms: float) -> bool:
        """
        One tick: physics, spawner, scoring/difficulty, collision, render.
        Does nothing unless running. Returns True if still running afterwards.
        """
        if self.state is not GameState.RUNNING:
            return False
        if delta_ms < 0:
            raise ValueError(f"delta_ms must be >= 0, got {delta_ms}")

        ctx = self.ctx
        ctx.elapsed_ms += delta_ms

        ctx.cat.update_physics()

        self.spawner.update(delta_ms, ctx.obstacles)
        ctx.obstacles = advance_obstacles(ctx.obstacles, ctx.speed, delta_ms)

        ctx.advance_score(delta_ms)
        self.presenter.set_score(ctx.display_score)

        if first_collision(ctx.cat.box, ctx.obstacles) is not None:
            self.game_over()

        self.render()
        return self.running

    def render(self):
        self.presenter.draw_scene(self.cat.box, self.obstacles, self.ctx.elapsed_ms)

    def render_idle(self):
        """Initial frame shown before the first run."""
        self.presenter.set_overlay(READY_TITLE, READY_MESSAGE, True)
        self.render()
