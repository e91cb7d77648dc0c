"""Tests for directional intents, reversed controls and commands."""

import pytest

from snake_arcade.config import Config, UP, DOWN, LEFT, RIGHT
from snake_arcade.game import (
    Status, apply_intent, new_game_state, push_intent, toggle_pause, update_game,
)
from snake_arcade.geometry import invert

ALL = [UP, DOWN, LEFT, RIGHT]


class TestTurnRejection:
    @pytest.mark.parametrize("reverse", [False, True])
    @pytest.mark.parametrize("velocity", ALL)
    def test_never_turns_back(self, make_state, velocity, reverse):
        """Whatever is pressed, the resulting direction is never the reciprocal of the velocity."""
        state = make_state()
        state.snake.velocity = velocity
        state.snake.reverse_controls = reverse
        for intent in ALL:
            state.queued_direction = None
            apply_intent(state, intent)
            assert state.queued_direction != invert(velocity)

    @pytest.mark.parametrize("velocity", ALL)
    def test_plain_reversal_rejected(self, make_state, velocity):
        """Pressing the opposite key is refused with normal controls."""
        state = make_state()
        state.snake.velocity = velocity
        assert apply_intent(state, invert(velocity)) is False

    def test_reverse_controls_remap(self, make_state):
        """With reversed controls, pressing LEFT while moving UP turns RIGHT."""
        state = make_state()
        state.snake.velocity = UP
        state.snake.reverse_controls = True
        assert apply_intent(state, LEFT) is True
        assert state.queued_direction == RIGHT

    def test_reverse_controls_turn_opposite_key_into_forward(self, make_state):
        """With reversed controls, the opposite key maps to the current direction."""
        state = make_state()
        state.snake.velocity = RIGHT
        state.snake.reverse_controls = True
        assert apply_intent(state, LEFT) is True
        assert state.queued_direction == RIGHT

    def test_cannot_turn_into_neck_when_stopped(self, make_state):
        """A stationary snake longer than one segment cannot turn into its second segment."""
        state = make_state()
        state.snake.segments = [(10, 10), (9, 10)]
        assert apply_intent(state, LEFT) is False
        assert apply_intent(state, UP) is True


class TestCommands:
    def test_direction_starts_idle_game(self):
        """A directional intent while idle starts the game and queues the turn."""
        state = new_game_state(Config(seed=3))
        assert state.status == Status.IDLE
        push_intent(state, "up")
        assert state.status == Status.RUNNING
        assert state.intents == [UP]
        update_game(state, 10)
        assert state.queued_direction == UP

    def test_unknown_direction_raises(self, make_state):
        """Only the four directions are accepted."""
        state = make_state()
        with pytest.raises(ValueError):
            push_intent(state, "sideways")

    def test_pause_blocks_input_and_time(self, make_state):
        """Paused games ignore intents and do not advance."""
        state = make_state()
        assert toggle_pause(state) is True
        push_intent(state, UP)
        assert state.intents == []
        clock = state.clock_ms
        update_game(state, 50)
        assert state.clock_ms == clock
        assert toggle_pause(state) is False
        assert state.status == Status.RUNNING

    def test_pause_ignored_when_idle(self):
        """Pause only toggles a running game."""
        state = new_game_state(Config(seed=3))
        assert toggle_pause(state) is False
        assert state.status == Status.IDLE
