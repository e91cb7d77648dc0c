# powerups.py
"""
Power-up items on the grid and the effects they trigger.

Every effect shares one contract: `start(state) -> handle` runs on pickup,
`end(state, handle)` runs exactly once when a timed effect expires. A kind
whose configured duration is 0 is instant: it starts and is never tracked.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .board import is_tile_empty, random_tile
from .entities import ActivePowerUp, PowerUpItem
from .geometry import Pos

if TYPE_CHECKING:
    from .game import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PowerUpEffect:
    name: str
    start: Callable[["GameState"], Any]
    end: Callable[["GameState", Any], None]


def _noop_start(state: GameState) -> None:
    return None

def _noop_end(state: GameState, handle: Any) -> None:
    return None

# ---------- speed: shorter step interval, restored exactly on end ----------
def _speed_start(state: GameState) -> None:
    state.speed_factor = state.cfg.speed_boost_factor

def _speed_end(state: GameState, handle: Any) -> None:
    state.speed_factor = 1.0

# ---------- slow: temporary global time scale ----------
def _slow_start(state: GameState) -> int:
    return state.time_scale.push(state.cfg.slow_time_scale)

def _slow_end(state: GameState, token: int) -> None:
    state.time_scale.pop(token)

# ---------- reverse controls ----------
def _reverse_start(state: GameState) -> None:
    state.snake.reverse_controls = True

def _reverse_end(state: GameState, handle: Any) -> None:
    state.snake.reverse_controls = False

# ---------- invincible ----------
def _invincible_start(state: GameState) -> None:
    state.snake.invincible = True

def _invincible_end(state: GameState, handle: Any) -> None:
    state.snake.invincible = False

# ---------- purple: one-shot shrink ----------
def _purple_start(state: GameState) -> int:
    """Cut a quarter of the body off the tail, never going below min_length."""
    snake = state.snake
    keep = max(state.cfg.min_length, len(snake) - len(snake) // 4)
    removed = max(0, len(snake) - keep)
    if removed:
        del snake.segments[keep:]
    return removed


EFFECTS: Dict[str, PowerUpEffect] = {
    "speed": PowerUpEffect("speed", _speed_start, _speed_end),
    "slow": PowerUpEffect("slow", _slow_start, _slow_end),
    "reverse": PowerUpEffect("reverse", _reverse_start, _reverse_end),
    "invincible": PowerUpEffect("invincible", _invincible_start, _invincible_end),
    # golden has no hooks: the food scorer asks whether it is active
    "golden": PowerUpEffect("golden", _noop_start, _noop_end),
    "purple": PowerUpEffect("purple", _purple_start, _noop_end),
}

KINDS = list(EFFECTS)


class PowerUpManager:
    def __init__(self) -> None:
        self.items: List[PowerUpItem] = []
        self.active: List[ActivePowerUp] = []
        self.spawn_timer_ms = 0.0

    def reset(self, state: GameState) -> None:
        self.items = []
        self.active = []
        self.spawn_timer_ms = self.next_interval(state)

    # ---------- Queries ----------
    def item_at(self, pos: Pos) -> Optional[PowerUpItem]:
        for item in self.items:
            if item.pos == pos:
                return item
        return None

    def find_active(self, kind: str) -> Optional[ActivePowerUp]:
        for effect in self.active:
            if effect.kind == kind:
                return effect
        return None

    def is_active(self, kind: str) -> bool:
        return self.find_active(kind) is not None

    def drop_outside(self, state: GameState) -> None:
        self.items = [i for i in self.items if state.zone.is_inside(*i.pos)]

    # ---------- Spawning ----------
    def next_interval(self, state: GameState) -> float:
        """Spawn interval shrinks a little each level down to a floor, plus jitter."""
        cfg = state.cfg
        base = cfg.powerup_interval_ms - (state.level - 1) * cfg.powerup_interval_step_ms
        return max(cfg.powerup_min_interval_ms, base) + state.rng.uniform(0, cfg.powerup_jitter_ms)

    def pick_kind(self, state: GameState) -> str:
        weights = state.cfg.powerup_weights
        kinds = [k for k in KINDS if weights.get(k, 0) > 0]
        return state.rng.choices(kinds, weights=[weights[k] for k in kinds])[0]

    def spawn(self, state: GameState) -> Optional[PowerUpItem]:
        cfg = state.cfg
        if len(self.items) >= cfg.powerup_max_items:
            return None
        kind = self.pick_kind(state)
        pos = random_tile(state, cfg.powerup_place_tries, lambda p: is_tile_empty(state, p))
        if pos is None:
            logger.debug("no free tile for %s power-up", kind)
            return None
        item = PowerUpItem(pos, kind, cfg.powerup_item_lifetime_ms)
        self.items.append(item)
        logger.debug("spawned %s at %s", kind, pos)
        return item

    # ---------- Effects ----------
    def activate(self, state: GameState, kind: str) -> Optional[ActivePowerUp]:
        """Start an effect. Re-activating a running effect only refreshes its time."""
        if kind not in EFFECTS:
            raise ValueError(f"Unknown power-up kind: {kind}")
        effect = EFFECTS[kind]
        duration = state.cfg.powerup_durations.get(kind, 0)

        if duration <= 0:
            effect.start(state)
            state.emit("powerup", kind=kind, duration=0)
            return None

        running = self.find_active(kind)
        if running is not None:
            running.remaining_ms = duration
            return running

        active = ActivePowerUp(kind, duration, effect.start(state))
        self.active.append(active)
        logger.debug("effect %s started for %dms", kind, duration)
        state.emit("powerup", kind=kind, duration=duration)
        return active

    def pickup(self, state: GameState, pos: Pos) -> Optional[str]:
        item = self.item_at(pos)
        if item is None:
            return None
        self.items.remove(item)
        self.activate(state, item.kind)
        return item.kind

    def update(self, state: GameState, delta_ms: float, real_delta_ms: float) -> None:
        """Spawn and item timers follow scaled time; effect durations follow real time."""
        self.spawn_timer_ms -= delta_ms
        if self.spawn_timer_ms <= 0:
            self.spawn(state)
            self.spawn_timer_ms = self.next_interval(state)

        for item in self.items:
            item.remaining_ms -= delta_ms
        self.items = [i for i in self.items if i.remaining_ms > 0]

        expired = []
        for effect in self.active:
            effect.remaining_ms -= real_delta_ms
            if effect.remaining_ms <= 0:
                expired.append(effect)
        for effect in expired:
            self.active.remove(effect)
            EFFECTS[effect.kind].end(state, effect.handle)
            logger.debug("effect %s ended", effect.kind)
