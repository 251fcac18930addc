"""
Freeze Timer
=============
Slicing an ICE target stops the blade for a while. Each cumulative ice hit
lasts longer than the last (3s, 6s, 9s, 9s, ...) and stacks on top of any
freeze still running.

The absolute end timestamp is the only authority on whether the blade is
frozen. Pausing parks the remaining duration; resuming re-anchors it, so
time spent paused never eats into the freeze.
"""

import math
from dataclasses import dataclass

from .settings import FREEZE_STEP_MS, FREEZE_CAP_MS


@dataclass
class FreezeTimer:
    end_ms: float = 0.0
    ice_hits: int = 0  # Cumulative for the whole session
    paused_remaining_ms: float = 0.0
    step_ms: float = FREEZE_STEP_MS
    cap_ms: float = FREEZE_CAP_MS

    def is_active(self, now_ms: float) -> bool:
        return now_ms < self.end_ms

    def remaining_ms(self, now_ms: float) -> float:
        return max(0.0, self.end_ms - now_ms)

    def next_duration(self) -> float:
        """Duration the next ice hit would add."""
        return min((self.ice_hits + 1) * self.step_ms, self.cap_ms)

    def register_hit(self, now_ms: float) -> float:
        """Stack a new freeze; returns the duration added."""
        duration = self.next_duration()
        self.ice_hits += 1
        self.end_ms = max(now_ms, self.end_ms) + duration
        return duration

    def suspend(self, now_ms: float) -> None:
        """Park the remaining duration (called on pause)."""
        self.paused_remaining_ms = self.remaining_ms(now_ms)

    def resume(self, now_ms: float) -> None:
        """Re-anchor a parked freeze at `now_ms` (called on resume)."""
        if self.paused_remaining_ms > 0:
            self.end_ms = now_ms + self.paused_remaining_ms
        self.paused_remaining_ms = 0.0

    def seconds_left(self, now_ms: float, paused: bool = False) -> int:
        """Whole seconds for the HUD countdown, 0 when inactive."""
        remaining = self.paused_remaining_ms if paused else self.remaining_ms(now_ms)
        return math.ceil(remaining / 1000) if remaining > 0 else 0
