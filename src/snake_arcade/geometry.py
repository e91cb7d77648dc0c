# geometry.py
"""Pure grid helpers. Positions are (x, y) integer tuples."""
import math
from typing import Iterator, List, Tuple

Pos = Tuple[int, int]

ORTHOGONAL = [(0, -1), (0, 1), (-1, 0), (1, 0)]


def in_bounds(x: int, y: int, size: int) -> bool:
    """Check if a cell is inside a size x size grid."""
    return 0 <= x < size and 0 <= y < size

def manhattan(a: Pos, b: Pos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])

def euclidean(a: Pos, b: Pos) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])

def chebyshev(a: Pos, b: Pos) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))

def add(a: Pos, b: Pos) -> Pos:
    return (a[0] + b[0], a[1] + b[1])

def neighbors(pos: Pos) -> List[Pos]:
    """The four orthogonal neighbours, unfiltered."""
    x, y = pos
    return [(x + dx, y + dy) for dx, dy in ORTHOGONAL]

def ring(center: Pos, radius: int) -> Iterator[Pos]:
    """
    Tiles at exactly Chebyshev distance `radius` from center, scanned
    column by column (dx outer, dy inner). Radius 0 yields the center.
    """
    cx, cy = center
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if abs(dx) == radius or abs(dy) == radius:
                yield (cx + dx, cy + dy)

def is_opposite(a: Pos, b: Pos) -> bool:
    return a != (0, 0) and a[0] == -b[0] and a[1] == -b[1]

def invert(direction: Pos) -> Pos:
    return (-direction[0], -direction[1])
