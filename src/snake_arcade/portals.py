# portals.py
"""Paired teleport portals that appear for a short window and then vanish."""
from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, List, Optional

from .board import is_tile_empty
from .entities import PortalPair
from .geometry import Pos, euclidean, manhattan

if TYPE_CHECKING:
    from .game import GameState

logger = logging.getLogger(__name__)

# offsets tried around the snake head (endpoint A) and the food (endpoint B)
RING_OFFSETS: List[Pos] = [
    (-3, -2), (3, -2), (-2, -3), (2, -3),
    (-3, 2), (3, 2), (-2, 3), (2, 3),
    (-3, 0), (3, 0), (0, -3), (0, 3),
]


class PortalManager:
    """
    Hidden --(spawn interval)--> Active --(active time)--> Hidden, forever.
    Pairs only exist while active.
    """

    def __init__(self) -> None:
        self.pairs: List[PortalPair] = []
        self.active = False
        self.timer_ms = 0.0
        self._ids = itertools.count(1)

    def reset(self) -> None:
        self.pairs = []
        self.active = False
        self.timer_ms = 0.0

    def arm(self, state: GameState) -> None:
        """Hide the portals and have the first pair show up after the first-appearance delay."""
        self.reset()
        cfg = state.cfg
        self.timer_ms = max(0.0, cfg.portal_spawn_interval_ms - cfg.portal_first_delay_ms)

    def update(self, state: GameState, delta_ms: float) -> None:
        cfg = state.cfg
        self.timer_ms += delta_ms
        if self.active:
            if self.timer_ms >= cfg.portal_active_ms:
                self.active = False
                self.pairs = []
                self.timer_ms = 0.0
                logger.debug("portals closed")
        elif self.timer_ms >= cfg.portal_spawn_interval_ms:
            self.ensure_pairs(state)
            self.active = True
            self.timer_ms = 0.0
            state.emit("portals_open", pairs=[(p.a, p.b) for p in self.pairs])

    # ---------- Queries ----------
    def portal_at(self, pos: Pos) -> Optional[PortalPair]:
        for pair in self.pairs:
            if pos == pair.a or pos == pair.b:
                return pair
        return None

    def paired_position(self, pos: Pos) -> Optional[Pos]:
        """Exit for an entry tile: A leads to B and B leads to A."""
        if not self.active:
            return None
        pair = self.portal_at(pos)
        return pair.other_end(pos) if pair is not None else None

    def alpha(self, state: GameState) -> float:
        """Visibility hint for the renderer: fade in, hold, fade out."""
        if not self.active:
            return 0.0
        cfg = state.cfg
        remaining = cfg.portal_active_ms - self.timer_ms
        alpha = 1.0
        if remaining < cfg.portal_fade_out_ms:
            alpha = max(0.0, remaining / cfg.portal_fade_out_ms)
        if self.timer_ms < cfg.portal_fade_in_ms:
            alpha = self.timer_ms / cfg.portal_fade_in_ms
        return alpha

    def drop_outside(self, state: GameState) -> None:
        self.pairs = [
            p for p in self.pairs
            if state.zone.is_inside(*p.a) and state.zone.is_inside(*p.b)
        ]

    # ---------- Placement ----------
    def valid_position(self, state: GameState, pos: Pos) -> bool:
        n = state.cfg.tile_count
        return 1 <= pos[0] < n - 1 and 1 <= pos[1] < n - 1 and is_tile_empty(state, pos)

    def in_direct_path(self, state: GameState, pos: Pos) -> bool:
        """The next two tiles straight ahead of a moving snake."""
        snake = state.snake
        if not snake.is_moving():
            return False
        (hx, hy), (vx, vy) = snake.head, snake.velocity
        return any(pos == (hx + vx * i, hy + vy * i) for i in range(1, 3))

    def in_snake_path(self, state: GameState, pos: Pos) -> bool:
        """
        Wide exclusion used for random placement: ten tiles ahead, the tiles
        beside the first eight of those, and anything within Manhattan 5 of the head.
        """
        snake = state.snake
        if not snake.is_moving():
            return False
        (hx, hy), (vx, vy) = snake.head, snake.velocity
        for i in range(1, 11):
            ax, ay = hx + vx * i, hy + vy * i
            if pos == (ax, ay):
                return True
            if i <= 8 and manhattan(pos, (ax, ay)) == 1:
                return True
        return manhattan(pos, snake.head) < 5

    def random_free(self, state: GameState) -> Optional[Pos]:
        """Edge-biased random search: half the candidates come from a 3-tile border band."""
        n, rng = state.cfg.tile_count, state.rng

        def band() -> int:
            return 1 + rng.randrange(3) if rng.random() < 0.5 else n - 4 + rng.randrange(3)

        for _ in range(state.cfg.portal_attempts):
            if rng.random() < 0.5:
                if rng.random() < 0.5:
                    pos = (1 + rng.randrange(n - 2), band())
                else:
                    pos = (band(), 1 + rng.randrange(n - 2))
            else:
                pos = (1 + rng.randrange(n - 2), 1 + rng.randrange(n - 2))
            if self.valid_position(state, pos) and not self.in_snake_path(state, pos):
                return pos
        return None

    def _shuffled_offsets(self, state: GameState) -> List[Pos]:
        offsets = list(RING_OFFSETS)
        state.rng.shuffle(offsets)
        return offsets

    def near_snake(self, state: GameState) -> Optional[Pos]:
        hx, hy = state.snake.head
        for dx, dy in self._shuffled_offsets(state):
            pos = (hx + dx, hy + dy)
            if self.valid_position(state, pos) and not self.in_direct_path(state, pos):
                return pos
        return self.random_free(state)

    def near_food_far_from(self, state: GameState, anchor: Optional[Pos]) -> Optional[Pos]:
        food = state.food or state.snake.head
        min_dist = state.cfg.portal_min_distance
        for dx, dy in self._shuffled_offsets(state):
            pos = (food[0] + dx, food[1] + dy)
            if not self.valid_position(state, pos) or pos == anchor:
                continue
            if anchor is None or euclidean(anchor, pos) >= min_dist:
                return pos
        if anchor is None:
            return self.random_free(state)
        return self.far_corner(state, anchor)

    def far_corner(self, state: GameState, anchor: Pos) -> Optional[Pos]:
        """Corner-ish tiles sorted farthest first from anchor, then any random tile."""
        n = state.cfg.tile_count
        corners = [(2, 2), (2, n - 3), (n - 3, 2), (n - 3, n - 3)]
        corners.sort(key=lambda c: euclidean(anchor, c), reverse=True)
        for corner in corners:
            if self.valid_position(state, corner):
                return corner
        pos = self.random_free(state)
        return pos if pos != anchor else None

    def ensure_pairs(self, state: GameState) -> int:
        """Replace the pairs; each endpoint B lands at least portal_min_distance from its A."""
        self.pairs = []
        min_dist = state.cfg.portal_min_distance
        for _ in range(state.cfg.portal_pairs):
            a = b = None
            for _attempt in range(state.cfg.portal_attempts):
                a = self.near_snake(state)
                b = self.near_food_far_from(state, a)
                if a is not None and b is not None and euclidean(a, b) >= min_dist:
                    break
            else:
                if a is not None:
                    b = self.far_corner(state, a)
            if a is None or b is None or a == b:
                logger.debug("no portal pair placed")
                continue
            pair = PortalPair(next(self._ids), a, b)
            self.pairs.append(pair)
            logger.debug("portal pair %d: %s <-> %s", pair.id, a, b)
        return len(self.pairs)
