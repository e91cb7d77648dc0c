# zone.py
"""Shrinking playable boundary."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

from .board import is_tile_empty, is_tile_free
from .geometry import Pos, ring

if TYPE_CHECKING:
    from .game import GameState

logger = logging.getLogger(__name__)


class ZoneManager:
    """
    The playable area is the square [inset, tile_count - inset) on both axes.
    Nothing shrinks before `zone_start_level`; after that the inset grows by
    one every `zone_shrink_interval_ms` until only a `zone_min_size` core is left.
    """

    def __init__(self, tile_count: int, min_size: int = 6) -> None:
        self.tile_count = tile_count
        self.min_size = min_size
        self.inset = 0
        self.timer_ms = 0.0

    @property
    def size(self) -> int:
        return self.tile_count - 2 * self.inset

    def bounds(self) -> Tuple[int, int]:
        """Half-open [lo, hi) range valid on both axes."""
        return self.inset, self.tile_count - self.inset

    def is_inside(self, x: int, y: int) -> bool:
        lo, hi = self.bounds()
        return lo <= x < hi and lo <= y < hi

    def can_shrink(self) -> bool:
        return self.size - 2 >= self.min_size

    def update(self, state: GameState, delta_ms: float) -> None:
        if state.level < state.cfg.zone_start_level or not self.can_shrink():
            return
        self.timer_ms += delta_ms
        if self.timer_ms >= state.cfg.zone_shrink_interval_ms:
            self.timer_ms = 0.0
            self.shrink(state)

    def shrink(self, state: GameState) -> bool:
        """Pull every edge in by one tile and evict whatever now lies outside."""
        if not self.can_shrink():
            return False
        self.inset += 1
        logger.debug("zone shrunk to %dx%d", self.size, self.size)
        state.obstacles.drop_outside(state)
        state.portals.drop_outside(state)
        state.powerups.drop_outside(state)
        if state.bonus is not None and not self.is_inside(*state.bonus.pos):
            state.bonus = None
        state.emit("zone_shrink", inset=self.inset, size=self.size)

        head = state.snake.head
        if not self.is_inside(head[0], head[1]):
            safe = self.find_safe_near_center(state)
            if safe is None:
                state.die("zone")
                return True
            # the body regrows behind the relocated head, one segment per step
            state.snake.grow(len(state.snake) - 1)
            state.snake.segments = [safe]
            # a fallback tile may hold an item; the head lands on it without collecting
            state.powerups.items = [i for i in state.powerups.items if i.pos != safe]
            if state.bonus is not None and state.bonus.pos == safe:
                state.bonus = None
            state.emit("zone_relocate", pos=safe)

        if state.food is None or not self.is_inside(*state.food) or state.food == state.snake.head:
            state.relocate_food()
        return True

    def find_safe_near_center(self, state: GameState) -> Optional[Pos]:
        """Nearest empty tile to the center, else the nearest tile that is merely free."""
        center = (self.tile_count // 2, self.tile_count // 2)
        for accept in (lambda p: is_tile_empty(state, p), lambda p: is_tile_free(state, p)):
            for r in range(self.size // 2 + 1):
                for cand in ring(center, r):
                    if accept(cand):
                        return cand
        return None
