# combo.py
from typing import List


class ComboTracker:
    """
    Three eats inside the rolling window trigger a combo. The multiplier is
    min(combos + 1, cap) and falls back to 1 once `decay_ms` pass without eating.
    """

    def __init__(self, window_ms: float = 2500.0, cap: int = 5, decay_ms: float = 4000.0) -> None:
        self.window_ms = window_ms
        self.cap = cap
        self.decay_ms = decay_ms
        self.reset()

    def reset(self) -> None:
        self.eat_times: List[float] = []
        self.count = 0
        self.multiplier = 1
        self.decay_remaining_ms = 0.0

    def register_eat(self, now_ms: float) -> bool:
        """Record an eat at game time now_ms. Returns True when it completes a combo."""
        self.eat_times = [t for t in self.eat_times if now_ms - t <= self.window_ms]
        self.eat_times.append(now_ms)
        if self.multiplier > 1:
            self.decay_remaining_ms = self.decay_ms
        if len(self.eat_times) < 3:
            return False
        self.count += 1
        self.multiplier = min(self.count + 1, self.cap)
        self.eat_times = []
        self.decay_remaining_ms = self.decay_ms
        return True

    def update(self, delta_ms: float) -> bool:
        """Tick the decay timer. Returns True on the frame the multiplier resets."""
        if self.decay_remaining_ms <= 0:
            return False
        self.decay_remaining_ms -= delta_ms
        if self.decay_remaining_ms > 0:
            return False
        self.decay_remaining_ms = 0.0
        self.count = 0
        self.multiplier = 1
        return True
