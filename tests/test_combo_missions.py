"""Tests for the combo multiplier and the mission tracker."""

from snake_arcade.combo import ComboTracker
from snake_arcade.config import RIGHT
from snake_arcade.game import step_game
from snake_arcade.missions import Mission, MissionReward, MissionTracker


def _mission(state, mission_id):
    return next(m for m in state.missions.missions if m.id == mission_id)


class TestCombo:
    def test_three_quick_eats_trigger(self):
        combo = ComboTracker()
        assert combo.register_eat(0) is False
        assert combo.register_eat(100) is False
        assert combo.register_eat(200) is True
        assert combo.multiplier == 2

    def test_next_combo_raises_multiplier(self):
        combo = ComboTracker()
        for t in (0, 100, 200):
            combo.register_eat(t)
        results = [combo.register_eat(t) for t in (300, 400, 500)]
        assert results == [False, False, True]
        assert combo.multiplier == 3

    def test_slow_eats_never_trigger(self):
        """Eats further apart than the window never add up to a combo."""
        combo = ComboTracker()
        for t in range(0, 30000, 3000):
            assert combo.register_eat(t) is False
        assert combo.multiplier == 1

    def test_multiplier_is_monotonic_and_capped(self):
        combo = ComboTracker()
        seen = []
        for i in range(18):
            combo.register_eat(i * 100)
            seen.append(combo.multiplier)
        assert seen == sorted(seen)
        assert max(seen) == 5

    def test_decay_resets_multiplier(self):
        combo = ComboTracker()
        for t in (0, 100, 200):
            combo.register_eat(t)
        assert combo.update(3999) is False
        assert combo.multiplier == 2
        assert combo.update(1) is True
        assert combo.multiplier == 1
        assert combo.count == 0

    def test_eating_refreshes_decay(self):
        combo = ComboTracker()
        for t in (0, 100, 200):
            combo.register_eat(t)
        combo.update(3000)
        combo.register_eat(3200)
        assert combo.update(3000) is False
        assert combo.multiplier == 2


class TestMissions:
    def test_progress_resets_on_reset_event(self, make_state):
        """Touching the edge wipes clean-eater progress."""
        state = make_state()
        for _ in range(4):
            state.missions.notify(state, "eat")
        assert _mission(state, "clean_eater").progress == 4
        state.missions.notify(state, "edge_touch")
        assert _mission(state, "clean_eater").progress == 0

    def test_completion_grants_score_once(self, make_state):
        state = make_state()
        for _ in range(5):
            state.missions.notify(state, "eat")
        clean = _mission(state, "clean_eater")
        assert clean.completed
        assert state.score == 50
        assert any(e.kind == "mission" and e.data["id"] == "clean_eater" for e in state.events)
        state.missions.notify(state, "eat")
        assert clean.progress == 5
        assert state.score == 50

    def test_powerup_reward(self, make_state):
        """The portal mission hands out invincibility."""
        state = make_state()
        state.missions.notify(state, "teleport")
        assert not state.snake.invincible
        state.missions.notify(state, "teleport")
        assert state.snake.invincible
        assert state.powerups.is_active("invincible")

    def test_completed_missions_leave_active_list(self, make_state):
        state = make_state()
        tracker = MissionTracker([
            Mission("one", "Do it once", "bonus", 1, MissionReward(score=5)),
        ])
        state.missions = tracker
        assert len(tracker.active) == 1
        done = tracker.notify(state, "bonus")
        assert [m.id for m in done] == ["one"]
        assert tracker.active == []

    def test_edge_step_counts_as_edge_touch(self, make_state):
        state = make_state()
        state.missions.notify(state, "eat")
        state.snake.segments = [(18, 10)]
        state.snake.velocity = RIGHT
        step_game(state)
        assert _mission(state, "clean_eater").progress == 0


class TestComboClock:
    def test_window_uses_scaled_game_time(self, make_state):
        """Eats close together in slowed game time still combo, however long in real time."""
        state = make_state()
        state.combo.register_eat(0)
        state.combo.register_eat(100)
        state.clock_ms = 9000
        state.game_time_ms = 200
        state.snake.segments = [(10, 10)]
        state.snake.velocity = RIGHT
        state.food = (11, 10)
        step_game(state)
        assert state.combo.multiplier == 2
        assert any(e.kind == "combo" for e in state.events)
