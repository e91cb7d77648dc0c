"""Tick-driven simulation core for a grid snake arcade game."""

from .config import CFG, Config
from .game import (
    GameState, Snapshot, Status,
    new_game_state, start_game, toggle_pause, restart_game,
    push_intent, update_game, step_game, step_interval, take_snapshot,
)

__all__ = [
    "CFG", "Config",
    "GameState", "Snapshot", "Status",
    "new_game_state", "start_game", "toggle_pause", "restart_game",
    "push_intent", "update_game", "step_game", "step_interval", "take_snapshot",
]
