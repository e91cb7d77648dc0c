"""Smoke tests for the pygame renderer and high-score persistence."""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from snake_arcade.config import BG, CELL_SIZE, HEIGHT, HUD_HEIGHT, RED, WIDTH
from snake_arcade.game import take_snapshot
from snake_arcade.main import load_high_score, save_high_score
from snake_arcade.render import draw_game, draw_game_over, fade


@pytest.fixture
def canvas():
    pygame.font.init()
    screen = pygame.Surface((WIDTH, HEIGHT))
    font = pygame.font.Font(None, 24)
    yield screen, font
    pygame.font.quit()


class TestDraw:
    def test_food_is_drawn_below_hud(self, make_state, canvas):
        screen, font = canvas
        state = make_state()
        draw_game(screen, font, take_snapshot(state))
        center = (CELL_SIZE // 2, HUD_HEIGHT + CELL_SIZE // 2)
        assert tuple(screen.get_at(center))[:3] == RED

    def test_game_over_overlay(self, make_state, canvas):
        screen, font = canvas
        state = make_state()
        snap = take_snapshot(state)
        draw_game(screen, font, snap)
        draw_game_over(screen, font, snap)

    def test_fade_endpoints(self):
        assert fade(RED, 1.0) == RED
        assert fade(RED, 0.0) == BG


class TestHighScoreFile:
    def test_round_trip(self, tmp_path):
        path = str(tmp_path / "best")
        save_high_score(420, path)
        assert load_high_score(path) == 420

    def test_missing_or_corrupt_file(self, tmp_path):
        assert load_high_score(str(tmp_path / "nope")) == 0
        bad = tmp_path / "bad"
        bad.write_text("not a number")
        assert load_high_score(str(bad)) == 0
