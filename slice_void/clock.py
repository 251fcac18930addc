"""
Clock
======
Wall-clock time source. Every timer in the game (spawn cadence, freeze,
pause, shake) compares millisecond timestamps from here, never frame counts.
"""

import time


class Clock:
    """Monotonic millisecond clock."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0
