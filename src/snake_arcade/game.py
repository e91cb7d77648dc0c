# game.py
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from .board import find_nearest_safe, is_tile_empty, is_tile_free, place_food, random_tile
from .combo import ComboTracker
from .config import CFG, DIRECTIONS, Config
from .effects import TimeScaleManager
from .entities import Bonus, GameEvent, Snake
from .geometry import Pos, add, in_bounds, invert, is_opposite
from .missions import MissionTracker
from .obstacles import ObstacleManager
from .portals import PortalManager
from .powerups import PowerUpManager
from .scheduler import Scheduler
from .zone import ZoneManager

logger = logging.getLogger(__name__)


class Status(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    DYING = "dying"
    GAME_OVER = "game_over"


# ---------- State ----------
@dataclass
class GameState:
    cfg: Config
    rng: random.Random
    snake: Snake
    start_pos: Pos
    food: Optional[Pos] = None
    bonus: Optional[Bonus] = None
    score: int = 0
    level: int = 1
    high_score: int = 0
    new_high_score: bool = False
    status: Status = Status.IDLE
    death_reason: Optional[str] = None
    game_speed_ms: int = 200        # base step interval for the current level
    speed_factor: float = 1.0       # < 1 while a speed boost runs
    accumulator_ms: float = 0.0
    clock_ms: float = 0.0           # unpaused game time
    game_time_ms: float = 0.0       # clock_ms with the time scale applied
    ticks: int = 0
    queued_direction: Optional[Pos] = None
    intents: List[Pos] = field(default_factory=list)
    map_protection: bool = False
    protected_until_ms: float = 0.0
    level_tokens: List[int] = field(default_factory=list)
    obstacles: ObstacleManager = field(default_factory=ObstacleManager)
    portals: PortalManager = field(default_factory=PortalManager)
    powerups: PowerUpManager = field(default_factory=PowerUpManager)
    zone: Optional[ZoneManager] = None
    combo: Optional[ComboTracker] = None
    missions: MissionTracker = field(default_factory=MissionTracker)
    time_scale: Optional[TimeScaleManager] = None
    scheduler: Scheduler = field(default_factory=Scheduler)
    events: List[GameEvent] = field(default_factory=list)

    def emit(self, kind: str, /, **data) -> None:
        self.events.append(GameEvent(kind, data))

    def is_protected(self) -> bool:
        """Obstacle and self collisions are harmless right now."""
        return self.snake.invincible or self.map_protection or self.clock_ms < self.protected_until_ms

    def relocate_food(self) -> Optional[Pos]:
        return place_food(self)

    def add_score(self, amount: int) -> None:
        before = self.score
        self.score += amount
        every = self.cfg.level_every_points
        for _ in range(self.score // every - before // every):
            level_up(self)

    def die(self, reason: str) -> bool:
        """Running -> Dying. Anything after the first fatal event is ignored."""
        if self.status != Status.RUNNING:
            return False
        self.status = Status.DYING
        self.death_reason = reason
        self.queued_direction = None
        self.intents.clear()
        self.time_scale.push(self.cfg.death_time_scale, self.cfg.death_delay_ms)
        self.scheduler.schedule(self.cfg.death_delay_ms, lambda: finish_game(self), "game_over")
        self.emit("death", reason=reason, head=self.snake.head)
        logger.info("snake died (%s) at score %d level %d", reason, self.score, self.level)
        return False


def new_game_state(cfg: Optional[Config] = None, high_score: int = 0,
                   rng: Optional[random.Random] = None) -> GameState:
    cfg = cfg or CFG
    center = (cfg.tile_count // 2, cfg.tile_count // 2)
    snake = Snake([(center[0] - i, center[1]) for i in range(max(1, cfg.start_length))])
    state = GameState(
        cfg=cfg,
        rng=rng or random.Random(cfg.seed),
        snake=snake,
        start_pos=center,
        high_score=high_score,
        game_speed_ms=cfg.start_speed_ms,
        zone=ZoneManager(cfg.tile_count, cfg.zone_min_size),
        combo=ComboTracker(cfg.combo_window_ms, cfg.combo_cap, cfg.combo_decay_ms),
        time_scale=TimeScaleManager(cfg.time_scale_transition_ms),
    )
    return state


# ---------- Commands ----------
def start_game(state: GameState) -> bool:
    """Idle -> Running: build the level 1 map, arm portals and timers, place food."""
    if state.status != Status.IDLE:
        return False
    state.obstacles.generate(state)
    state.portals.arm(state)
    state.powerups.reset(state)
    state.relocate_food()
    state.status = Status.RUNNING
    state.emit("start")
    logger.info("game started")
    return True

def toggle_pause(state: GameState) -> bool:
    """Running <-> Paused. Returns True if the game is paused afterwards."""
    if state.status == Status.RUNNING:
        state.status = Status.PAUSED
        state.intents.clear()
    elif state.status == Status.PAUSED:
        state.status = Status.RUNNING
    return state.status == Status.PAUSED

def restart_game(state: GameState) -> GameState:
    """Full reset into a fresh running game. Pending delayed actions of the old game are dropped."""
    state.scheduler.clear()
    fresh = new_game_state(state.cfg, state.high_score, state.rng)
    start_game(fresh)
    return fresh

def push_intent(state: GameState, direction: Union[str, Pos]) -> None:
    """Buffer a directional intent; it is resolved during the next frame's input stage."""
    if isinstance(direction, str):
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {direction}")
        direction = DIRECTIONS[direction]
    if state.status == Status.IDLE:
        start_game(state)
    if state.status != Status.RUNNING:
        return
    state.intents.append(direction)

def apply_intent(state: GameState, direction: Pos) -> bool:
    """Remap for reversed controls, then refuse any turn back into the body."""
    snake = state.snake
    if snake.reverse_controls:
        direction = invert(direction)
    if is_opposite(direction, snake.velocity):
        return False
    if len(snake) > 1 and add(snake.head, direction) == snake.segments[1]:
        return False
    state.queued_direction = direction
    return True


# ---------- Level flow ----------
def level_up(state: GameState) -> None:
    cfg = state.cfg
    state.level += 1
    speedup = min(state.level * cfg.speedup_per_level_ms, cfg.max_speedup_ms)
    state.game_speed_ms = max(cfg.min_speed_ms, cfg.start_speed_ms - speedup)
    state.emit("level_up", level=state.level)
    logger.info("level %d, step interval %dms", state.level, state.game_speed_ms)

    for token in state.level_tokens:
        state.scheduler.cancel(token)
    state.map_protection = True
    state.level_tokens = [
        state.scheduler.schedule(cfg.map_change_delay_ms, lambda: change_map(state), "map_change"),
        state.scheduler.schedule(cfg.map_change_delay_ms + cfg.level_protection_ms,
                                 lambda: end_protection(state), "protection_end"),
    ]

def change_map(state: GameState) -> None:
    """Every preset_every_levels-th level swaps in a preset; other levels regenerate shapes."""
    cfg = state.cfg
    state.obstacles.moving_walls = []
    if state.level % cfg.preset_every_levels == 0:
        state.obstacles.apply_random_preset(state)
    else:
        state.obstacles.generate(state)
    if state.level >= cfg.moving_walls_from_level:
        state.obstacles.add_moving_walls(state, min(state.level - 1, cfg.max_moving_walls))
    state.portals.reset()
    if state.food is None:
        state.relocate_food()
    state.emit("map_change", preset=state.obstacles.preset)

def end_protection(state: GameState) -> None:
    state.map_protection = False
    state.level_tokens = []
    state.emit("protection_end")

def finish_game(state: GameState) -> None:
    """Dying -> GameOver, recording a new high score if there is one."""
    if state.status != Status.DYING:
        return
    state.status = Status.GAME_OVER
    if state.score > state.high_score:
        state.high_score = state.score
        state.new_high_score = True
    state.emit("game_over", score=state.score, level=state.level, high_score=state.high_score)
    logger.info("game over: score=%d level=%d high=%d", state.score, state.level, state.high_score)


# ---------- Update ----------
def step_interval(state: GameState) -> float:
    return state.game_speed_ms * state.speed_factor

def update_game(state: GameState, delta_ms: float) -> int:
    """
    Advance one frame. The delta is clamped, then subsystems update in a fixed
    order: scheduled actions, time scale, power-ups, bonus, obstacles, portals,
    zone, input, then as many discrete steps as the accumulator allows, then combo.
    Returns the number of steps taken.
    """
    if state.status not in (Status.RUNNING, Status.DYING):
        return 0
    delta = max(0.0, min(delta_ms, state.cfg.max_frame_ms))
    state.clock_ms += delta
    state.scheduler.run_due(state.clock_ms)
    state.time_scale.update(delta)
    if state.status != Status.RUNNING:
        return 0

    scaled = delta * state.time_scale.scale
    state.game_time_ms += scaled
    state.powerups.update(state, scaled, delta)
    _update_bonus(state, scaled)
    state.obstacles.update(scaled)
    state.portals.update(state, scaled)
    state.zone.update(state, scaled)
    if state.status != Status.RUNNING:
        return 0

    for direction in state.intents:
        apply_intent(state, direction)
    state.intents.clear()

    steps = 0
    state.accumulator_ms += scaled
    while state.status == Status.RUNNING and state.accumulator_ms >= step_interval(state):
        state.accumulator_ms -= step_interval(state)
        step_game(state)
        steps += 1

    if state.combo.update(scaled):
        state.emit("combo_end")
    return steps

def _update_bonus(state: GameState, delta_ms: float) -> None:
    if state.bonus is None:
        return
    state.bonus.remaining_ms -= delta_ms
    if state.bonus.remaining_ms <= 0:
        state.bonus = None


# ---------- Step ----------
def step_game(state: GameState) -> bool:
    """
    Advance the snake by one tile. Returns True if alive, False if dying.
    Collision checks come before teleport resolution, which comes before
    pickups, which come before the tail adjustment.
    """
    if state.status != Status.RUNNING:
        return False
    state.ticks += 1

    # Commit direction once per tick
    snake = state.snake
    if state.queued_direction is not None:
        snake.velocity = state.queued_direction
        state.queued_direction = None
    if not snake.is_moving():
        return True

    head = add(snake.head, snake.velocity)
    shielded = state.is_protected()

    # Boundaries are lethal even when shielded
    if not in_bounds(head[0], head[1], state.cfg.tile_count):
        return state.die("wall")
    if not state.zone.is_inside(head[0], head[1]):
        return state.die("zone")
    if not shielded and state.obstacles.collides(head):
        return state.die("obstacle")
    if snake.collides_with(head):
        if not shielded:
            return state.die("self")
        # shielded bite: the bitten segment and everything behind it fall off
        cut = snake.segments.index(head)
        del snake.segments[cut:]
        state.emit("bite", lost=cut)

    exit_pos = state.portals.paired_position(head)
    if exit_pos is not None:
        if not is_tile_free(state, exit_pos, ignore_portals=True):
            exit_pos = find_nearest_safe(state, exit_pos, 3)
        if exit_pos is None:
            return state.die("teleport")
        state.emit("teleport", entry=head, exit=exit_pos)
        head = exit_pos
        state.protected_until_ms = state.clock_ms + state.cfg.teleport_protection_ms
        state.missions.notify(state, "teleport")

    snake.unshift_head(head)

    if head == state.food:
        _eat(state)
    # Grow / move: a pending growth credit keeps the tail this tick
    snake.pop_tail()

    if state.bonus is not None and state.bonus.pos == head:
        state.bonus = None
        state.add_score(state.cfg.bonus_points)
        state.emit("bonus", points=state.cfg.bonus_points)
        state.missions.notify(state, "bonus")

    kind = state.powerups.pickup(state, head)
    if kind is not None:
        state.missions.notify(state, "powerup_pickup")

    lo, hi = state.zone.bounds()
    if head[0] in (lo, hi - 1) or head[1] in (lo, hi - 1):
        state.missions.notify(state, "edge_touch")
    return state.status == Status.RUNNING

def _eat(state: GameState) -> None:
    cfg = state.cfg
    golden = 2 if state.powerups.is_active("golden") else 1
    gained = int(cfg.points_per_food * state.combo.multiplier * golden)
    state.snake.grow(1)
    state.relocate_food()
    if state.bonus is None and state.rng.random() < cfg.bonus_chance:
        pos = random_tile(state, cfg.food_tries, lambda p: is_tile_empty(state, p))
        if pos is not None:
            state.bonus = Bonus(pos, cfg.bonus_lifetime_ms)
    state.emit("eat", points=gained, food=state.food)

    if state.combo.register_eat(state.game_time_ms):
        state.emit("combo", count=state.combo.count, multiplier=state.combo.multiplier)
        state.missions.notify(state, "combo")
    state.missions.notify(state, "eat")
    state.add_score(gained)


# ---------- Snapshot ----------
@dataclass(frozen=True)
class Snapshot:
    """Read-only view handed to the renderer once per frame."""
    status: Status
    snake: Tuple[Pos, ...]
    velocity: Pos
    food: Optional[Pos]
    bonus: Optional[Pos]
    obstacles: frozenset
    moving_walls: Tuple[Pos, ...]
    portals: Tuple[Tuple[Pos, Pos], ...]
    portals_active: bool
    portal_alpha: float
    powerup_items: Tuple[Tuple[Pos, str], ...]
    active_powerups: Tuple[Tuple[str, float], ...]
    zone_inset: int
    score: int
    level: int
    high_score: int
    combo_multiplier: int
    missions: Tuple[Tuple[str, str, int, int, bool], ...]
    protected: bool
    time_scale: float
    death_reason: Optional[str]
    events: Tuple[GameEvent, ...]

def take_snapshot(state: GameState) -> Snapshot:
    """Freeze the renderable state and drain the transient events."""
    events = tuple(state.events)
    state.events = []
    return Snapshot(
        status=state.status,
        snake=tuple(state.snake.segments),
        velocity=state.snake.velocity,
        food=state.food,
        bonus=state.bonus.pos if state.bonus else None,
        obstacles=frozenset(state.obstacles.tiles),
        moving_walls=tuple(state.obstacles.moving_tiles()),
        portals=tuple((p.a, p.b) for p in state.portals.pairs) if state.portals.active else (),
        portals_active=state.portals.active,
        portal_alpha=state.portals.alpha(state),
        powerup_items=tuple((i.pos, i.kind) for i in state.powerups.items),
        active_powerups=tuple((a.kind, a.remaining_ms) for a in state.powerups.active),
        zone_inset=state.zone.inset,
        score=state.score,
        level=state.level,
        high_score=max(state.high_score, state.score),
        combo_multiplier=state.combo.multiplier,
        missions=tuple((m.id, m.description, m.progress, m.required, m.completed)
                       for m in state.missions.missions),
        protected=state.is_protected(),
        time_scale=state.time_scale.scale,
        death_reason=state.death_reason,
        events=events,
    )
