# missions.py
"""Event-driven objectives with one-shot rewards."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, List, Optional

if TYPE_CHECKING:
    from .game import GameState

logger = logging.getLogger(__name__)


@dataclass
class MissionReward:
    score: int = 0
    powerup: Optional[str] = None


@dataclass
class Mission:
    id: str
    description: str
    event: str                     # game event kind that counts toward the target
    required: int
    reward: MissionReward = field(default_factory=MissionReward)
    reset_on: FrozenSet[str] = frozenset()
    progress: int = 0
    completed: bool = False


def default_missions() -> List[Mission]:
    return [
        Mission("clean_eater", "Eat 5 apples without touching the edge", "eat", 5,
                MissionReward(score=50), reset_on=frozenset({"edge_touch"})),
        Mission("jumper", "Travel through 2 portals", "teleport", 2,
                MissionReward(powerup="invincible")),
        Mission("collector", "Pick up 3 power-ups", "powerup_pickup", 3,
                MissionReward(score=100)),
        Mission("combo_artist", "Trigger 2 combos", "combo", 2,
                MissionReward(powerup="golden")),
        Mission("bonus_hunter", "Grab 2 bonus items", "bonus", 2,
                MissionReward(score=75)),
    ]


class MissionTracker:
    def __init__(self, missions: Optional[List[Mission]] = None) -> None:
        self.missions = missions if missions is not None else default_missions()

    @property
    def active(self) -> List[Mission]:
        return [m for m in self.missions if not m.completed]

    def notify(self, state: GameState, event: str) -> List[Mission]:
        """Feed one game event to every active mission; returns the ones it completed."""
        done = []
        for mission in self.active:
            if event in mission.reset_on:
                mission.progress = 0
                continue
            if event != mission.event:
                continue
            mission.progress += 1
            if mission.progress >= mission.required:
                mission.completed = True
                done.append(mission)
        for mission in done:
            self._grant(state, mission)
        return done

    def _grant(self, state: GameState, mission: Mission) -> None:
        logger.info("mission %s complete", mission.id)
        state.emit("mission", id=mission.id, description=mission.description)
        if mission.reward.score:
            state.add_score(mission.reward.score)
        if mission.reward.powerup:
            state.powerups.activate(state, mission.reward.powerup)
