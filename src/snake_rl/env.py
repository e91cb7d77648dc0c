# src/snake_rl/env.py
from __future__ import annotations
from dataclasses import dataclass, field
import random

import numpy as np  # type: ignore
import pygame       # type: ignore

from snake_arcade.config import CFG, Config, HEIGHT, WIDTH, UP, DOWN, LEFT, RIGHT
from snake_arcade.game import (
    GameState, Status, new_game_state, push_intent, start_game, take_snapshot, update_game,
)
from snake_arcade.render import draw_game

# -----------------------------------------------------------------------------
# Actions: integers -> grid directions (dx, dy)
# -----------------------------------------------------------------------------
ACTIONS = {
    0: UP,
    1: DOWN,
    2: LEFT,
    3: RIGHT,
}

FRAME_MS = 1000.0 / 60.0
MAX_FRAMES_PER_STEP = 600

# -----------------------------------------------------------------------------
# Small geometry helpers
# -----------------------------------------------------------------------------
def _left_of(direction):
    """Rotate a direction 90° CCW."""
    dx, dy = direction
    return (dy, -dx)

def _right_of(direction):
    """Rotate a direction 90° CW."""
    dx, dy = direction
    return (-dy, dx)

def _would_hit(state: GameState, direction) -> bool:
    """
    Returns True if moving the head 1 cell in 'direction' would be fatal
    right now: outside the zone, into an obstacle or into the body.
    """
    hx, hy = state.snake.head
    nx, ny = hx + direction[0], hy + direction[1]
    if not state.zone.is_inside(nx, ny):
        return True
    if state.obstacles.collides((nx, ny)):
        return True
    return (nx, ny) in state.snake.segments

def _manhattan(ax: int, ay: int, bx: int, by: int) -> int:
    """Manhattan (L1) distance on the grid."""
    return abs(ax - bx) + abs(ay - by)

# -----------------------------------------------------------------------------
# Observation function
# -----------------------------------------------------------------------------
def _obs(state: GameState) -> np.ndarray:
    """
    Return a compact 9-D observation vector.

    Features:
      0: hx_n  - head x normalized in [0, 1]
      1: hy_n  - head y normalized in [0, 1]
      2: fx_n  - food x normalized in [0, 1]
      3: fy_n  - food y normalized in [0, 1]
      4: dx    - current direction x component in {-1, 0, 1}
      5: dy    - current direction y component in {-1, 0, 1}
      6: danger_ahead  - 1.0 if the next cell forward would be fatal
      7: danger_left   - 1.0 if the next cell to the left would be fatal
      8: danger_right  - 1.0 if the next cell to the right would be fatal
    """
    hx, hy = state.snake.head
    fx, fy = state.food if state.food is not None else (hx, hy)

    # Normalize positions to [0, 1]
    denom = max(state.cfg.tile_count - 1, 1)

    dx, dy = state.snake.velocity
    direction = state.snake.velocity
    if direction == (0, 0):
        danger = (0.0, 0.0, 0.0)
    else:
        danger = (
            float(_would_hit(state, direction)),
            float(_would_hit(state, _left_of(direction))),
            float(_would_hit(state, _right_of(direction))),
        )

    return np.array(
        [hx / denom, hy / denom, fx / denom, fy / denom, float(dx), float(dy), *danger],
        dtype=np.float32,
    )

# -----------------------------------------------------------------------------
# RL Environment
# -----------------------------------------------------------------------------
@dataclass
class SnakeEnv:
    """
    Gym-like wrapper that plays the full game through its frame-update API:
    every env step feeds 60 fps frames until the snake has moved once, so
    portals, power-ups, the zone and combos all behave as in a live game.

    Rewards:
      + eat_reward  when the score went up during the step
      + shaping_coef * (d_before - d_after) per step (closer -> positive)
      + step_penalty per step (tiny negative to discourage dithering)
      + death_reward on death
    """
    step_penalty: float = -0.001
    eat_reward: float   = 1.0
    death_reward: float = -1.0
    shaping_coef: float = 0.01
    seed_value: int     = 0
    debug: bool         = False  # set True to print shaping distances
    config: Config      = field(default_factory=lambda: CFG)

    # enable/disable pygame rendering
    render_enabled: bool = False

    def __post_init__(self):
        # Deterministic RNG for reproducibility
        self.rng = random.Random(self.seed_value)
        np.random.seed(self.seed_value)
        self.state: GameState | None = None

        self.screen = None
        self.font = None
        self.clock = None

        if self.render_enabled:
            pygame.init()
            self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
            pygame.display.set_caption("Snake autopilot")
            self.font = pygame.font.SysFont(None, 24)
            self.clock = pygame.time.Clock()

    # Gym-like API -------------------------------------------------------------
    def reset(self, seed: int | None = None) -> np.ndarray:
        """Start a new running game. Returns the initial observation."""
        if seed is not None:
            self.rng.seed(seed)
            np.random.seed(seed)

        self.state = new_game_state(self.config, rng=self.rng)
        start_game(self.state)
        return _obs(self.state)

    def step(self, action: int):
        """
        Apply an action (0..3), advance until exactly one grid step happened, and return:
          (obs, reward, terminated, info)
        """
        assert self.state is not None, "Call reset() first."
        assert action in ACTIONS, f"Invalid action {action}"
        state = self.state

        # 1) Queue the intent; the core rejects 180° reversals itself
        push_intent(state, ACTIONS[action])

        # 2) Distance before move for shaping
        hx, hy = state.snake.head
        fx, fy = state.food if state.food is not None else (hx, hy)
        d_before = _manhattan(hx, hy, fx, fy)
        score_before = state.score
        if self.debug:
            print(f"Before: {d_before}")

        # 3) Feed frames until the snake moved or died
        ticks = state.ticks
        for _ in range(MAX_FRAMES_PER_STEP):
            update_game(state, FRAME_MS)
            if state.ticks != ticks or state.status != Status.RUNNING:
                break

        # 4) Terminal check
        if state.status != Status.RUNNING:
            info = {"reason": state.death_reason, "score": state.score, "level": state.level}
            return _obs(state), self.death_reward, True, info

        # 5) Reward
        reward = self.step_penalty
        if state.score > score_before:
            reward += self.eat_reward

        hx2, hy2 = state.snake.head
        fx2, fy2 = state.food if state.food is not None else (hx2, hy2)
        d_after = _manhattan(hx2, hy2, fx2, fy2)
        if self.debug:
            print(f"After:  {d_after}")
        reward += self.shaping_coef * (d_before - d_after)

        info = {"score": state.score, "level": state.level}
        return _obs(state), reward, False, info

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------
    def render(self, mode: str = "human") -> None:
        """
        Render the current game state with the game's own renderer.
        Only does anything if render_enabled=True.
        """
        if not self.render_enabled or self.state is None or self.screen is None:
            return

        # Handle window close events
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit()
                raise SystemExit

        draw_game(self.screen, self.font, take_snapshot(self.state))
        pygame.display.flip()

        # Limit FPS so it's actually watchable
        if self.clock is not None:
            self.clock.tick(15)

    def close(self) -> None:
        if self.render_enabled:
            pygame.quit()

    @property
    def action_space_n(self) -> int:
        return 4

    @property
    def observation_space_shape(self):
        # 9 features defined in _obs()
        return (9,)
