# entities.py
"""Plain data records owned by a single GameState."""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .geometry import Pos


@dataclass
class Snake:
    segments: List[Pos]            # head at index 0
    velocity: Pos = (0, 0)
    grow_pending: int = 0
    invincible: bool = False
    reverse_controls: bool = False

    @property
    def head(self) -> Pos:
        return self.segments[0]

    def __len__(self) -> int:
        return len(self.segments)

    def unshift_head(self, head: Pos) -> None:
        self.segments.insert(0, head)

    def pop_tail(self) -> None:
        """Drop the tail, unless a growth credit is pending; then spend it instead."""
        if self.grow_pending > 0:
            self.grow_pending -= 1
        else:
            self.segments.pop()

    def grow(self, n: int = 1) -> None:
        self.grow_pending += n

    def collides_with(self, pos: Pos) -> bool:
        return pos in self.segments

    def is_moving(self) -> bool:
        return self.velocity != (0, 0)


@dataclass
class Bonus:
    pos: Pos
    remaining_ms: float


@dataclass
class MovingWall:
    """A wall tile hopping along a short path; occupancy is derived from elapsed time."""
    path: List[Pos]
    period_ms: float
    phase_ms: float = 0.0

    def tile_at(self, elapsed_ms: float) -> Pos:
        index = int((elapsed_ms + self.phase_ms) // self.period_ms) % len(self.path)
        return self.path[index]


@dataclass
class PortalPair:
    id: int
    a: Pos
    b: Pos

    def other_end(self, pos: Pos) -> Optional[Pos]:
        if pos == self.a:
            return self.b
        if pos == self.b:
            return self.a
        return None


@dataclass
class PowerUpItem:
    pos: Pos
    kind: str
    remaining_ms: float


@dataclass
class ActivePowerUp:
    kind: str
    remaining_ms: float
    handle: Any = None             # whatever the effect's start hook returned


@dataclass
class GameEvent:
    kind: str                      # "eat", "death", "combo", "mission", "level_up", ...
    data: dict = field(default_factory=dict)
