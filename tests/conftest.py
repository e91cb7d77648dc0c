import pytest

from snake_arcade.config import Config
from snake_arcade.game import new_game_state, start_game, update_game


@pytest.fixture
def make_state():
    """
    A running game on an empty board: no obstacles, portals hidden, no
    power-ups scheduled, no bonus rolls, food parked in the top-left corner.
    Tests then place exactly what they need.
    """
    def _make(**overrides):
        params = dict(seed=7, bonus_chance=0.0)
        params.update(overrides)
        state = new_game_state(Config(**params))
        start_game(state)
        state.obstacles.reset()
        state.portals.reset()
        state.powerups.items = []
        state.powerups.spawn_timer_ms = 1e9
        state.bonus = None
        state.food = (0, 0)
        state.events.clear()
        return state
    return _make


@pytest.fixture
def run_frames():
    """Feed fixed-size frames through update_game; returns the number of steps taken."""
    def _run(state, frames, frame_ms=50.0):
        steps = 0
        for _ in range(frames):
            steps += update_game(state, frame_ms)
        return steps
    return _run
