# board.py
"""Occupancy queries and bounded free-tile searches shared by every placement routine."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from .geometry import Pos, neighbors, ring

if TYPE_CHECKING:
    from .game import GameState


def is_tile_free(state: GameState, pos: Pos, ignore_portals: bool = False) -> bool:
    """Inside the zone and not covered by snake, obstacle, moving-wall path or portal."""
    if not state.zone.is_inside(pos[0], pos[1]):
        return False
    if state.snake.collides_with(pos):
        return False
    if state.obstacles.blocks(pos):
        return False
    if not ignore_portals and state.portals.portal_at(pos) is not None:
        return False
    return True

def is_tile_empty(state: GameState, pos: Pos) -> bool:
    """Free, and also clear of food, bonus and power-up items."""
    if not is_tile_free(state, pos):
        return False
    if state.food == pos:
        return False
    if state.bonus is not None and state.bonus.pos == pos:
        return False
    return state.powerups.item_at(pos) is None

def open_neighbors(state: GameState, pos: Pos) -> int:
    """Orthogonal neighbours inside the zone that no obstacle covers."""
    return sum(
        1 for n in neighbors(pos)
        if state.zone.is_inside(n[0], n[1]) and not state.obstacles.blocks(n)
    )

def random_tile(state: GameState, tries: int,
                accept: Callable[[Pos], bool]) -> Optional[Pos]:
    """Uniform random tile inside the zone passing `accept`, or None after `tries` misses."""
    lo, hi = state.zone.bounds()
    for _ in range(tries):
        pos = (state.rng.randrange(lo, hi), state.rng.randrange(lo, hi))
        if accept(pos):
            return pos
    return None

def scan_tile(state: GameState, accept: Callable[[Pos], bool]) -> Optional[Pos]:
    """First accepted tile in row-major order; the fallback when random tries run out."""
    lo, hi = state.zone.bounds()
    for y in range(lo, hi):
        for x in range(lo, hi):
            if accept((x, y)):
                return (x, y)
    return None

def find_nearest_safe(state: GameState, pos: Pos, max_radius: int = 3) -> Optional[Pos]:
    """Nearest free tile in expanding Chebyshev rings around pos."""
    for r in range(max_radius + 1):
        for cand in ring(pos, r):
            if is_tile_free(state, cand):
                return cand
    return None

def place_food(state: GameState) -> Optional[Pos]:
    """
    Move food to a random empty tile with at least three open neighbours.
    Falls back to the first empty tile in scan order; None only on a full board.
    """
    def fair(pos: Pos) -> bool:
        return is_tile_empty(state, pos) and open_neighbors(state, pos) >= 3

    state.food = None
    pos = random_tile(state, state.cfg.food_tries, fair)
    if pos is None:
        pos = scan_tile(state, lambda p: is_tile_empty(state, p))
    state.food = pos
    return pos
