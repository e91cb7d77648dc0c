from dataclasses import dataclass, field
from typing import Dict, Optional

# ----- Window & grid -----
TILE_COUNT = 20
CELL_SIZE = 30
HUD_HEIGHT = 32
WIDTH, HEIGHT = TILE_COUNT * CELL_SIZE, TILE_COUNT * CELL_SIZE + HUD_HEIGHT

# ----- Colors -----
BG       = (20, 20, 24)
GRID     = (32, 32, 40)
GREEN    = (76, 175, 80)
HEAD     = (0, 255, 136)
GOLD     = (255, 215, 0)
RED      = (220, 60, 60)
OBSTACLE = (110, 110, 130)
MOVING   = (170, 120, 90)
PORTAL_COLORS = [(127, 0, 255), (255, 127, 0)]
ZONE     = (120, 20, 30)
TEXT     = (220, 220, 230)

POWERUP_COLORS = {
    "speed": (0, 200, 255),
    "slow": (120, 160, 255),
    "reverse": (255, 80, 200),
    "invincible": (255, 255, 255),
    "golden": (255, 215, 0),
    "purple": (160, 60, 220),
}

# ----- Directions (dx, dy) -----
UP, DOWN, LEFT, RIGHT = (0, -1), (0, 1), (-1, 0), (1, 0)
STOPPED = (0, 0)
DIRECTIONS = {"up": UP, "down": DOWN, "left": LEFT, "right": RIGHT}


def _default_weights() -> Dict[str, int]:
    return {"speed": 25, "slow": 20, "reverse": 10, "invincible": 15, "golden": 20, "purple": 10}


def _default_durations() -> Dict[str, int]:
    return {"speed": 3000, "slow": 4000, "reverse": 5000, "invincible": 5000, "golden": 8000, "purple": 0}


# ----- Tunables (what you'd tweak for difficulty) -----
@dataclass
class Config:
    seed: Optional[int] = 0
    tile_count: int = TILE_COUNT
    start_length: int = 1

    # pacing
    start_speed_ms: int = 200
    min_speed_ms: int = 100
    max_speedup_ms: int = 45
    speedup_per_level_ms: int = 3
    max_frame_ms: float = 60.0

    # scoring
    points_per_food: int = 10
    level_every_points: int = 50
    bonus_chance: float = 0.3
    bonus_points: int = 50
    bonus_lifetime_ms: float = 5000.0
    food_tries: int = 500

    # death cinematic
    death_delay_ms: float = 1200.0
    death_time_scale: float = 0.3

    # level transitions
    map_change_delay_ms: float = 500.0
    level_protection_ms: float = 3000.0
    teleport_protection_ms: float = 50.0
    preset_every_levels: int = 3

    # obstacles
    obstacle_attempts: int = 200
    obstacle_margin: int = 3
    start_safe_radius: int = 4
    max_obstacle_shapes: int = 8
    moving_walls_from_level: int = 2
    max_moving_walls: int = 3
    moving_wall_period_ms: float = 900.0

    # portals
    portal_pairs: int = 1
    portal_spawn_interval_ms: float = 18000.0
    portal_active_ms: float = 4000.0
    portal_first_delay_ms: float = 3000.0
    portal_min_distance: float = 12.0
    portal_attempts: int = 100
    portal_fade_in_ms: float = 300.0
    portal_fade_out_ms: float = 2000.0

    # power-ups
    powerup_interval_ms: float = 12000.0
    powerup_min_interval_ms: float = 6000.0
    powerup_interval_step_ms: float = 500.0
    powerup_jitter_ms: float = 3000.0
    powerup_item_lifetime_ms: float = 10000.0
    powerup_max_items: int = 2
    powerup_place_tries: int = 100
    powerup_weights: Dict[str, int] = field(default_factory=_default_weights)
    powerup_durations: Dict[str, int] = field(default_factory=_default_durations)
    speed_boost_factor: float = 0.6
    slow_time_scale: float = 0.5
    min_length: int = 2

    # effect manager
    time_scale_transition_ms: float = 250.0

    # zone
    zone_start_level: int = 3
    zone_shrink_interval_ms: float = 15000.0
    zone_min_size: int = 6

    # combo
    combo_window_ms: float = 2500.0
    combo_cap: int = 5
    combo_decay_ms: float = 4000.0


CFG = Config(seed=0)
