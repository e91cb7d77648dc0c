# obstacles.py
"""Procedural obstacle shapes, level presets and moving walls."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from .entities import MovingWall
from .geometry import Pos, chebyshev, neighbors

if TYPE_CHECKING:
    from .game import GameState

logger = logging.getLogger(__name__)


def _rows(*rows: str) -> List[Pos]:
    """Build a tile-offset list from an ASCII sketch ('#' = tile)."""
    return [(x, y) for y, row in enumerate(rows) for x, ch in enumerate(row) if ch == "#"]


SHAPES: Dict[str, List[Pos]] = {
    "spiral": _rows(
        "######",
        "..##.#",
        ".###.#",
        ".#...#",
        ".#####",
    ),
    "cross": _rows(
        "..#..",
        "..#..",
        "#####",
        "..#..",
        "..#..",
    ),
    "hollow_square": _rows(
        "#####",
        "#...#",
        "#.#.#",
        "#...#",
        "#####",
    ),
    "arrow": _rows(
        "..#..",
        ".###.",
        "#####",
        "..#..",
        "..#..",
    ),
    "diamond": _rows(
        "..#..",
        ".#.#.",
        "#...#",
        ".#.#.",
        "..#..",
    ),
    "plus_gaps": _rows(
        "..#..",
        "..#..",
        "##.##",
        "..#..",
        "..#..",
    ),
    "zigzag": _rows(
        "###",
        "..#",
        "###",
        "#..",
        "###",
    ),
    "checkerboard": _rows(
        "#.#.#",
        ".#.#.",
        "#.#.#",
        ".#.#.",
        "#.#.#",
    ),
    "circuit": _rows(
        "#####",
        "#...#",
        "#####",
        "#...#",
        "#####",
    ),
    "bar": _rows("######"),
}

ISLAND_SHAPES: List[List[Pos]] = [
    [(0, 0), (1, 0), (0, 1)],
    [(0, 0), (1, 0), (1, 1)],
    [(0, 0), (1, 0), (2, 0)],
    [(0, 0), (0, 1), (0, 2)],
]

PRESETS = ("maze", "corridors", "islands", "symmetrical")


class ObstacleManager:
    def __init__(self) -> None:
        self.tiles: Set[Pos] = set()
        self.moving_walls: List[MovingWall] = []
        self.elapsed_ms = 0.0
        self.preset: Optional[str] = None

    def reset(self) -> None:
        self.tiles = set()
        self.moving_walls = []
        self.elapsed_ms = 0.0
        self.preset = None

    def update(self, delta_ms: float) -> None:
        self.elapsed_ms += delta_ms

    # ---------- Queries ----------
    def moving_tiles(self) -> List[Pos]:
        return [w.tile_at(self.elapsed_ms) for w in self.moving_walls]

    def collides(self, pos: Pos) -> bool:
        """Lethal right now: a static tile or a moving wall's current tile."""
        return pos in self.tiles or pos in self.moving_tiles()

    def blocks(self, pos: Pos) -> bool:
        """Unusable for placement: static tiles and every tile on a moving-wall path."""
        return pos in self.tiles or any(pos in w.path for w in self.moving_walls)

    def drop_outside(self, state: GameState) -> None:
        self.tiles = {t for t in self.tiles if state.zone.is_inside(t[0], t[1])}
        self.moving_walls = [
            w for w in self.moving_walls
            if all(state.zone.is_inside(x, y) for x, y in w.path)
        ]

    # ---------- Procedural shapes ----------
    def _near_start(self, state: GameState, x: int, y: int) -> bool:
        r = state.cfg.start_safe_radius
        for sx, sy in (state.start_pos, state.snake.head):
            if abs(x - sx) < r and abs(y - sy) < r:
                return True
        return False

    def _placement_ok(self, state: GameState, x: int, y: int) -> bool:
        pos = (x, y)
        if not state.zone.is_inside(x, y):
            return False
        if self._near_start(state, x, y):
            return False
        if state.snake.collides_with(pos) or self.blocks(pos) or pos == state.food:
            return False
        if state.bonus is not None and pos == state.bonus.pos:
            return False
        if state.portals.portal_at(pos) is not None or state.powerups.item_at(pos) is not None:
            return False
        return True

    def _preset_ok(self, state: GameState, pos: Pos) -> bool:
        """Presets may crowd the start area, but never the live snake or its head."""
        if not state.zone.is_inside(pos[0], pos[1]):
            return False
        if state.snake.collides_with(pos) or chebyshev(pos, state.snake.head) <= 2:
            return False
        if pos == state.food or any(pos in w.path for w in self.moving_walls):
            return False
        if state.bonus is not None and pos == state.bonus.pos:
            return False
        return state.portals.portal_at(pos) is None and state.powerups.item_at(pos) is None

    def has_pathways(self, placed: List[Pos], state: GameState) -> bool:
        """True when at least one tile of the placed shape has an open neighbour."""
        covered = set(placed)
        for tile in placed:
            for n in neighbors(tile):
                if (state.zone.is_inside(n[0], n[1])
                        and n not in covered and n not in self.tiles):
                    return True
        return False

    def try_place_shape(self, state: GameState, shape: List[Pos]) -> Optional[List[Pos]]:
        """Bounded random search for an anchor; None means skip this shape."""
        cfg = state.cfg
        width = max(x for x, _ in shape) + 1
        height = max(y for _, y in shape) + 1
        margin = cfg.obstacle_margin
        max_x = cfg.tile_count - margin - width
        max_y = cfg.tile_count - margin - height
        if max_x <= margin or max_y <= margin:
            return None

        for _ in range(cfg.obstacle_attempts):
            bx = margin + state.rng.randrange(max_x - margin)
            by = margin + state.rng.randrange(max_y - margin)
            placed = [(bx + dx, by + dy) for dx, dy in shape]
            if not all(self._placement_ok(state, x, y) for x, y in placed):
                continue
            if not self.has_pathways(placed, state):
                continue
            return placed
        return None

    def generate(self, state: GameState) -> None:
        """Replace the map with up to min(level * 1.5, cap) procedural shapes."""
        self.tiles = set()
        self.preset = None
        count = min(int(state.level * 1.5), state.cfg.max_obstacle_shapes)
        names = list(SHAPES)
        for i in range(count):
            name = state.rng.choice(names)
            placed = self.try_place_shape(state, SHAPES[name])
            if placed is None:
                logger.debug("skipped shape %s (%d) after %d attempts", name, i, state.cfg.obstacle_attempts)
                continue
            self.tiles.update(placed)
            logger.debug("placed shape %s at %s", name, placed[0])
        logger.debug("total procedural obstacle tiles: %d", len(self.tiles))

    # ---------- Presets ----------
    def apply_random_preset(self, state: GameState) -> str:
        pick = state.rng.choice(PRESETS)
        emit = getattr(self, f"_preset_{pick}")
        raw: Set[Pos] = set(emit(state))
        self.tiles = {t for t in raw if self._preset_ok(state, t)}
        self.preset = pick
        logger.debug("applied %s preset with %d obstacles", pick, len(self.tiles))
        return pick

    def _center(self, state: GameState) -> int:
        return state.cfg.tile_count // 2

    def _preset_maze(self, state: GameState) -> List[Pos]:
        n, c, rng = state.cfg.tile_count, self._center(state), state.rng
        out: List[Pos] = []
        for x in range(3, n - 3, 2):
            for y in range(3, n - 3, 2):
                if rng.random() < 0.7 and abs(x - c) >= 3 and abs(y - c) >= 3:
                    out.append((x, y))
                    if rng.random() < 0.3:
                        out.append((x + 1, y))
                    if rng.random() < 0.3:
                        out.append((x, y + 1))
        return out

    def _preset_corridors(self, state: GameState) -> List[Pos]:
        n, rng = state.cfg.tile_count, state.rng
        out: List[Pos] = []
        for _ in range(4):
            vertical = rng.random() < 0.5
            line = 4 + rng.randrange(n - 8)
            for j in range(2, n - 2):
                if j % 4 != 0:  # periodic gaps
                    out.append((line, j) if vertical else (j, line))
        return out

    def _preset_islands(self, state: GameState) -> List[Pos]:
        n, rng = state.cfg.tile_count, state.rng
        far = n - 7
        anchors = [(3, 3), (far, 3), (3, far), (far, far), (n // 2 - 2, n // 2 - 2)]
        out: List[Pos] = []
        for ax, ay in anchors:
            if rng.random() < 0.7:
                for dx, dy in rng.choice(ISLAND_SHAPES):
                    x, y = ax + dx, ay + dy
                    if 2 <= x < n - 2 and 2 <= y < n - 2:
                        out.append((x, y))
        return out

    def _preset_symmetrical(self, state: GameState) -> List[Pos]:
        n, c = state.cfg.tile_count, self._center(state)
        out: List[Pos] = []
        for x in range(2, n - 2):
            for y in range(2, n - 2):
                on_lattice = x % 3 == 0 and y % 3 == 0
                on_diagonal = x == n - y - 1 and x % 2 == 0
                if (on_lattice or on_diagonal) and abs(x - c) >= 3 and abs(y - c) >= 3:
                    out.append((x, y))
        return out

    # ---------- Moving walls ----------
    def add_moving_walls(self, state: GameState, count: int) -> int:
        """Add up to `count` walls hopping along 2-3 tile straight paths."""
        cfg, rng = state.cfg, state.rng
        added = 0
        lo, hi = state.zone.bounds()
        for _ in range(count):
            for _attempt in range(cfg.obstacle_attempts):
                length = rng.choice((2, 3))
                dx, dy = rng.choice(((1, 0), (0, 1)))
                x, y = rng.randrange(lo, hi), rng.randrange(lo, hi)
                path = [(x + dx * i, y + dy * i) for i in range(length)]
                if all(self._placement_ok(state, px, py) for px, py in path):
                    phase = rng.random() * cfg.moving_wall_period_ms * length
                    self.moving_walls.append(MovingWall(path, cfg.moving_wall_period_ms, phase))
                    added += 1
                    break
        return added
