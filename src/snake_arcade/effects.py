# effects.py
"""Stacked, time-bounded global time-scale modifiers with eased transitions."""
import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class TimeScaleModifier:
    token: int
    target: float
    remaining_ms: Optional[float]   # None = until popped


def ease_out_quad(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


class TimeScaleManager:
    """
    The effective scale eases toward the top-of-stack target (1.0 when the
    stack is empty) over `transition_ms` every time the stack changes.
    Expiry counts real (unscaled) frame time.
    """

    def __init__(self, transition_ms: float = 250.0) -> None:
        self.transition_ms = transition_ms
        self.stack: List[TimeScaleModifier] = []
        self.scale = 1.0
        self._from = 1.0
        self._to = 1.0
        self._elapsed = 0.0
        self._ids = itertools.count(1)

    @property
    def target(self) -> float:
        return self.stack[-1].target if self.stack else 1.0

    def push(self, target: float, duration_ms: Optional[float] = None) -> int:
        token = next(self._ids)
        self.stack.append(TimeScaleModifier(token, target, duration_ms))
        logger.debug("time scale push %.2f (%s ms) token=%d", target, duration_ms, token)
        self._retarget()
        return token

    def pop(self, token: int) -> bool:
        for i, mod in enumerate(self.stack):
            if mod.token == token:
                del self.stack[i]
                self._retarget()
                return True
        return False

    def clear(self) -> None:
        self.stack.clear()
        self.scale = self._from = self._to = 1.0
        self._elapsed = 0.0

    def _retarget(self) -> None:
        self._from = self.scale
        self._to = self.target
        self._elapsed = 0.0
        if self.transition_ms <= 0:
            self.scale = self._to

    def update(self, delta_ms: float) -> None:
        expired = False
        for mod in self.stack:
            if mod.remaining_ms is not None:
                mod.remaining_ms -= delta_ms
                expired = expired or mod.remaining_ms <= 0
        if expired:
            self.stack = [m for m in self.stack if m.remaining_ms is None or m.remaining_ms > 0]
            self._retarget()

        if self.scale != self._to and self.transition_ms > 0:
            self._elapsed = min(self._elapsed + delta_ms, self.transition_ms)
            t = ease_out_quad(self._elapsed / self.transition_ms)
            self.scale = self._from + (self._to - self._from) * t
            if self._elapsed >= self.transition_ms:
                self.scale = self._to
