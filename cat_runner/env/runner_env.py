# cat_runner/env/runner_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from cat_runner.game.config import WIDTH, HEIGHT, FPS, REFERENCE_FRAME_MS
from cat_runner.game.render import NullPresenter, PygameRenderer
from cat_runner.game.sim import Simulation
from cat_runner.game.storage import MemoryBestScoreStore
from cat_runner.env.observations import OBS_SIZE, build_observation


class RunnerEnv(gym.Env):
    """
    Cat Runner Gymnasium environment (vector observations).
    - Simulation stepped at a fixed REFERENCE_FRAME_MS per frame.
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Observation: shape (6,), float32 (see observations.build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.frame_ms = REFERENCE_FRAME_MS

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            frames = time_limit_seconds * 1000.0 / self.frame_ms
            self.time_limit_decisions = int(frames / self.frame_skip)

        # Actions: 0 = NOOP, 1 = JUMP
        self.action_space = gym.spaces.Discrete(2)
        low = np.array([0.0, -1.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float32)
        high = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, shape=(OBS_SIZE,), dtype=np.float32)

        self.sim: Optional[Simulation] = None
        self.store = MemoryBestScoreStore()
        self.timestep: int = 0
        self.jumps: int = 0

        # Rendering
        self.screen = None
        self.clock = None
        self.renderer: Optional[PygameRenderer] = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # Explicit seed -> reproducible obstacles; otherwise draw one from np_random
        if seed is not None:
            sim_seed = int(seed)
        else:
            sim_seed = int(self.np_random.integers(0, 2**31 - 1))

        self.sim = Simulation(presenter=NullPresenter(), store=self.store, seed=sim_seed)
        if self.renderer is not None:
            self.sim.presenter = self.renderer
            self.renderer.set_best(self.sim.best)
        self.sim.start()
        self.timestep = 0
        self.jumps = 0

        return self._get_obs(), self._info()

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.sim is not None, "Call reset() before step()"

        if action == 1 and self.sim.jump():
            self.jumps += 1

        for _ in range(self.frame_skip):
            if not self.sim.step(self.frame_ms):
                break

        alive = self.sim.running
        reward = 1.0 if alive else -1.0

        self.timestep += 1
        terminated = not alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._info()

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.sim is not None
        return build_observation(self.sim)

    def _info(self) -> Dict[str, Any]:
        assert self.sim is not None
        return {
            "seed": self.sim.seed,
            "score": self.sim.ctx.display_score,
            "speed": self.sim.ctx.speed,
            "elapsed_ms": self.sim.ctx.elapsed_ms,
            "timestep": self.timestep,
            "grounded": self.sim.cat.grounded,
            "jumps": self.jumps,
            "best": self.sim.best,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.sim is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Cat Runner - Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()
            self.renderer = PygameRenderer(self.screen)
            self.renderer.set_best(self.sim.best)
            self.sim.presenter = self.renderer

        self.renderer.set_score(self.sim.ctx.display_score)
        self.sim.render()

        if self.render_mode == "human":
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.renderer = None
