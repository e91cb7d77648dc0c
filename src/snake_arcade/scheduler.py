# scheduler.py
"""
Delayed actions as time-stamped callbacks polled once per frame.

Nothing here runs on its own: `run_due` is called by the frame update
with the game clock, so a pending action can never outlive the state
that owns it, and a cancelled token can never fire.
"""
import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


@dataclass
class ScheduledEvent:
    token: int
    fire_at_ms: float
    callback: Callable[[], None]
    label: str = ""


class Scheduler:
    def __init__(self) -> None:
        self._pending: Dict[int, ScheduledEvent] = {}
        self._ids = itertools.count(1)
        self.now_ms = 0.0

    def schedule(self, delay_ms: float, callback: Callable[[], None], label: str = "") -> int:
        token = next(self._ids)
        self._pending[token] = ScheduledEvent(token, self.now_ms + delay_ms, callback, label)
        return token

    def cancel(self, token: int) -> bool:
        return self._pending.pop(token, None) is not None

    def clear(self) -> None:
        self._pending.clear()

    def is_pending(self, token: int) -> bool:
        return token in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def run_due(self, now_ms: float) -> int:
        """Fire every event due at now_ms, oldest first. Returns how many fired."""
        self.now_ms = now_ms
        fired = 0
        while True:
            due = [e for e in self._pending.values() if e.fire_at_ms <= now_ms]
            if not due:
                return fired
            event = min(due, key=lambda e: (e.fire_at_ms, e.token))
            # pop before firing so a callback that clears/cancels can't double-fire
            del self._pending[event.token]
            logger.debug("firing scheduled %s at %.0fms", event.label or event.token, now_ms)
            event.callback()
            fired += 1
