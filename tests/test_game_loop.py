"""Tests for the frame update: clamping, the step accumulator, lifecycle and level flow."""

import pytest

from snake_arcade.config import RIGHT, STOPPED, Config
from snake_arcade.game import (
    Status, change_map, new_game_state, restart_game, take_snapshot, toggle_pause, update_game,
)


def _events(state, kind):
    return [e for e in state.events if e.kind == kind]


class TestAccumulator:
    def test_frame_delta_is_clamped(self, make_state):
        state = make_state()
        update_game(state, 1000)
        assert state.clock_ms == 60

    def test_negative_delta_is_ignored(self, make_state):
        state = make_state()
        assert update_game(state, -20) == 0
        assert state.clock_ms == 0

    def test_steps_follow_interval(self, make_state, run_frames):
        """500ms of 50ms frames at a 200ms interval is two steps with 100ms carried over."""
        state = make_state()
        assert run_frames(state, 10) == 2
        assert state.ticks == 2
        assert state.accumulator_ms == pytest.approx(100)

    def test_level_curve(self, make_state):
        """The interval drops 3ms per level, capped at 45ms and floored at the minimum."""
        state = make_state()
        state.add_score(50)
        assert state.level == 2
        assert state.game_speed_ms == 194
        state.add_score(50 * 20)
        assert state.game_speed_ms == 155

    def test_game_time_follows_time_scale(self, make_state, run_frames):
        """Slow motion advances game time at the scaled rate while the clock stays real."""
        state = make_state(time_scale_transition_ms=0)
        state.time_scale.push(0.5)
        run_frames(state, 10)
        assert state.clock_ms == pytest.approx(500)
        assert state.game_time_ms == pytest.approx(250)


class TestLifecycle:
    def test_idle_game_does_nothing(self):
        state = new_game_state(Config(seed=1))
        assert state.status == Status.IDLE
        assert update_game(state, 50) == 0
        assert state.clock_ms == 0

    def test_paused_game_does_nothing(self, make_state, run_frames):
        state = make_state()
        assert toggle_pause(state) is True
        assert run_frames(state, 20) == 0
        assert state.clock_ms == 0
        assert toggle_pause(state) is False
        assert state.status == Status.RUNNING

    def test_wall_death_then_game_over(self, make_state, run_frames):
        """Death slows time for the cinematic, then the game ends."""
        state = make_state()
        state.high_score = 10
        state.score = 30
        state.snake.segments = [(19, 10)]
        state.snake.velocity = RIGHT
        run_frames(state, 4)
        assert state.status == Status.DYING
        assert state.death_reason == "wall"
        run_frames(state, 30)
        assert state.status == Status.GAME_OVER
        assert state.high_score == 30
        assert state.new_high_score is True
        assert _events(state, "game_over")

    def test_lower_score_keeps_high_score(self, make_state, run_frames):
        state = make_state()
        state.high_score = 100
        state.score = 20
        state.snake.segments = [(19, 10)]
        state.snake.velocity = RIGHT
        run_frames(state, 40)
        assert state.status == Status.GAME_OVER
        assert state.high_score == 100
        assert state.new_high_score is False

    def test_restart_carries_high_score(self, make_state):
        state = make_state()
        state.high_score = 120
        state.score = 80
        fresh = restart_game(state)
        assert fresh is not state
        assert fresh.status == Status.RUNNING
        assert fresh.score == 0
        assert fresh.level == 1
        assert fresh.high_score == 120
        assert fresh.food is not None


class TestLevelFlow:
    def test_map_change_and_protection_window(self, make_state, run_frames):
        """A level-up swaps the map after a short delay and shields the snake for a while."""
        state = make_state()
        state.score = 40
        state.snake.segments = [(10, 10)]
        state.snake.velocity = RIGHT
        state.food = (11, 10)
        run_frames(state, 4)
        assert state.level == 2
        assert state.map_protection
        state.snake.velocity = STOPPED
        state.events.clear()

        run_frames(state, 9)
        assert not _events(state, "map_change")
        run_frames(state, 1)
        assert _events(state, "map_change")
        assert state.obstacles.moving_walls

        run_frames(state, 59)
        assert state.map_protection
        run_frames(state, 1)
        assert not state.map_protection
        assert _events(state, "protection_end")

    def test_preset_on_third_level(self, make_state):
        state = make_state()
        state.level = 3
        change_map(state)
        assert state.obstacles.preset is not None


class TestSnapshot:
    def test_snapshot_drains_events(self, make_state):
        state = make_state()
        state.emit("ping", value=1)
        snap = take_snapshot(state)
        assert [e.kind for e in snap.events] == ["ping"]
        assert state.events == []
        assert take_snapshot(state).events == ()

    def test_snapshot_is_a_copy(self, make_state):
        state = make_state()
        snap = take_snapshot(state)
        state.snake.segments.append((1, 1))
        assert (1, 1) not in snap.snake
        assert snap.status == Status.RUNNING
        assert snap.high_score == max(state.high_score, state.score)
