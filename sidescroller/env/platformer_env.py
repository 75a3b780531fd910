# sidescroller/env/platformer_env.py
from __future__ import annotations
from typing import Optional, Tuple, Dict, Any, List
import numpy as np
import gymnasium as gym
import pygame

from sidescroller.game.config import WIDTH, HEIGHT, FPS
from sidescroller.game.painter import Painter
from sidescroller.game.world import Game, GameState, Key
from sidescroller.env.observations import build_observation, OBS_SIZE

# action id -> (left, right, jump)
ACTIONS: Tuple[Tuple[bool, bool, bool], ...] = (
    (False, False, False),  # 0 NOOP
    (True, False, False),   # 1 LEFT
    (False, True, False),   # 2 RIGHT
    (False, False, True),   # 3 JUMP
    (True, False, True),    # 4 LEFT + JUMP
    (False, True, True),    # 5 RIGHT + JUMP
)
ACTION_NAMES = ("NOOP", "LEFT", "RIGHT", "JUMP", "LEFT+JUMP", "RIGHT+JUMP")

DEATH_PENALTY = -5.0
WIN_BONUS = 10.0
SCORE_SCALE = 100.0      # points per unit of reward
PROGRESS_SCALE = 100.0   # px per unit of reward


class PlatformerEnv(gym.Env):
    """
    Platformer Gymnasium environment (vector observations).
    - The wrapped Game ticks at 60 Hz.
    - The agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Actions are held for the whole decision; JUMP fires once at its start.
    - Observation: shape (33,), float32, see observations.py.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 90.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unknown render_mode {render_mode}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(len(ACTIONS))
        self.observation_space = gym.spaces.Box(low=-1.0, high=1.0, shape=(OBS_SIZE,), dtype=np.float32)

        # --- Runtime state ---
        self.game: Optional[Game] = None
        self.timestep: int = 0

        # Rendering
        self.screen = None
        self.clock = None
        self.painter = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)
        # the level is fixed, so the seed only feeds self.np_random
        self.game = Game()
        self.game.start()
        self.timestep = 0

        obs = build_observation(self.game)
        info = self._info([])
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.game is not None, "Call reset() before step()"
        game = self.game

        left, right, jump = ACTIONS[int(action)]
        for key, held in ((Key.LEFT, left), (Key.RIGHT, right)):
            if held:
                game.press(key)
            else:
                game.release(key)
        if jump:
            game.press(Key.JUMP)

        score_before = game.score
        x_before = game.player.x
        events = []
        for _ in range(self.frame_skip):
            events += game.update()
            if game.is_over:
                break

        if jump:
            game.release(Key.JUMP)

        reward = (game.score - score_before) / SCORE_SCALE + (game.player.x - x_before) / PROGRESS_SCALE
        if game.state is GameState.GAME_OVER:
            reward += DEATH_PENALTY
        elif game.state is GameState.GAME_WON:
            reward += WIN_BONUS

        self.timestep += 1
        terminated = game.is_over
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions) and not terminated:
            truncated = True

        obs = build_observation(game)
        info = self._info(events)

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # -------------------- Helpers --------------------

    def _info(self, events: List) -> Dict[str, Any]:
        game = self.game
        assert game is not None
        return {
            "score": game.score,
            "progress": game.progress,
            "health": game.player.health,
            "state": game.state.value,
            "on_ground": game.player.on_ground,
            "timestep": self.timestep,
            "events": [ev.kind for ev in events],
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.game is None:
            return None

        if self.render_mode == "human":
            if self.screen is None:
                pygame.init()
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Side-scroller - Gym Env")
                self.clock = pygame.time.Clock()
                self.painter = Painter(WIDTH, HEIGHT)
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()
            self.painter.draw(self.screen, self.game)
            pygame.display.flip()
            self.clock.tick(self.metadata.get("render_fps", FPS))
            return None

        # rgb_array: off-screen surface, no window
        if self.screen is None:
            pygame.font.init()
            self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.painter = Painter(WIDTH, HEIGHT)
        self.painter.draw(self.screen, self.game)
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None and self.render_mode == "human":
            pygame.display.quit()
            pygame.quit()
        self.screen = None
        self.clock = None
        self.painter = None
