"""Tests for procedural shapes, presets and moving walls."""

import pytest

from snake_arcade.config import RIGHT
from snake_arcade.entities import Bonus, MovingWall
from snake_arcade.game import Status, change_map, step_game
from snake_arcade.geometry import chebyshev
from snake_arcade.obstacles import PRESETS, SHAPES, ObstacleManager


class TestShapes:
    def test_shapes_are_normalized(self):
        """Every sketch starts at offset zero on both axes."""
        for name, shape in SHAPES.items():
            assert shape, name
            assert min(x for x, _ in shape) == 0
            assert min(y for _, y in shape) == 0

    @pytest.mark.parametrize("seed", [1, 2, 3, 4])
    def test_generate_respects_safety_rules(self, make_state, seed):
        """Generated tiles avoid the start area, the snake and the food."""
        state = make_state(seed=seed)
        state.level = 4
        state.food = (4, 15)
        state.obstacles.generate(state)
        assert state.obstacles.tiles
        for x, y in state.obstacles.tiles:
            assert not (abs(x - 10) < 4 and abs(y - 10) < 4)
            assert (x, y) not in state.snake.segments
            assert (x, y) != state.food
            assert 3 <= x < 17 and 3 <= y < 17

    def test_oversized_shape_is_skipped(self, make_state):
        state = make_state()
        wide = [(x, 0) for x in range(18)]
        assert state.obstacles.try_place_shape(state, wide) is None

    def test_enclosed_shape_has_no_pathway(self, make_state):
        state = make_state()
        state.obstacles.tiles = {(4, 5), (6, 5), (5, 4), (5, 6)}
        assert state.obstacles.has_pathways([(5, 5)], state) is False
        state.obstacles.tiles.discard((5, 6))
        assert state.obstacles.has_pathways([(5, 5)], state) is True


class TestPresets:
    @pytest.mark.parametrize("seed", range(8))
    def test_preset_keeps_head_clear(self, make_state, seed):
        state = make_state(seed=seed)
        state.snake.segments = [(6, 6), (5, 6), (4, 6)]
        state.food = (9, 9)
        name = state.obstacles.apply_random_preset(state)
        assert name in PRESETS
        assert state.obstacles.preset == name
        for tile in state.obstacles.tiles:
            assert chebyshev(tile, state.snake.head) > 2
            assert tile not in state.snake.segments
            assert tile != state.food

    @pytest.mark.parametrize("name", PRESETS)
    def test_every_preset_emits_tiles(self, make_state, name):
        state = make_state()
        tiles = getattr(state.obstacles, f"_preset_{name}")(state)
        assert all(0 <= x < 20 and 0 <= y < 20 for x, y in tiles)
        if name != "islands":
            assert tiles


class TestMovingWalls:
    def test_position_is_discrete(self):
        wall = MovingWall([(1, 1), (2, 1), (3, 1)], 100)
        assert wall.tile_at(0) == (1, 1)
        assert wall.tile_at(99) == (1, 1)
        assert wall.tile_at(100) == (2, 1)
        assert wall.tile_at(200) == (3, 1)
        assert wall.tile_at(300) == (1, 1)

    def test_collides_versus_blocks(self):
        """Only the current tile is lethal but the whole path is off limits for placement."""
        obstacles = ObstacleManager()
        obstacles.moving_walls = [MovingWall([(1, 1), (2, 1)], 100)]
        assert obstacles.collides((1, 1))
        assert not obstacles.collides((2, 1))
        assert obstacles.blocks((2, 1))
        obstacles.update(100)
        assert obstacles.collides((2, 1))

    def test_moving_wall_kills(self, make_state):
        state = make_state()
        state.snake.segments = [(5, 10)]
        state.snake.velocity = RIGHT
        state.obstacles.moving_walls = [MovingWall([(6, 10), (7, 10)], 1e9)]
        step_game(state)
        assert state.status == Status.DYING
        assert state.death_reason == "obstacle"

    def test_protection_passes_through_obstacles(self, make_state):
        state = make_state()
        state.snake.segments = [(5, 10)]
        state.snake.velocity = RIGHT
        state.obstacles.tiles = {(6, 10)}
        state.map_protection = True
        step_game(state)
        assert state.status == Status.RUNNING
        assert state.snake.head == (6, 10)

    def test_add_moving_walls(self, make_state):
        state = make_state()
        state.food = (15, 15)
        assert state.obstacles.add_moving_walls(state, 2) == 2
        for wall in state.obstacles.moving_walls:
            assert 2 <= len(wall.path) <= 3
            for tile in wall.path:
                assert state.zone.is_inside(*tile)
                assert tile not in state.snake.segments
                assert tile != state.food

    def test_walls_outside_zone_are_dropped(self, make_state):
        state = make_state()
        state.obstacles.moving_walls = [MovingWall([(0, 4), (1, 4)], 100), MovingWall([(5, 5), (6, 5)], 100)]
        state.zone.inset = 1
        state.obstacles.drop_outside(state)
        assert [w.path[0] for w in state.obstacles.moving_walls] == [(5, 5)]


class TestMapChange:
    @pytest.mark.parametrize("level", [5, 6])
    @pytest.mark.parametrize("seed", range(10))
    def test_map_change_keeps_bonus_reachable(self, make_state, level, seed):
        """Neither shapes, presets nor moving-wall paths cover a live bonus."""
        state = make_state(seed=seed)
        state.level = level
        state.bonus = Bonus((6, 6), 5000)
        change_map(state)
        assert (6, 6) not in state.obstacles.tiles
        assert not state.obstacles.blocks((6, 6))
        assert state.bonus is not None
