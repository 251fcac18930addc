"""
Keyboard Controls
==================
Terminal stand-in for a pointer: a blade cursor steered with WASD or the
arrow keys. While it moves it emits one (x, y) sample per tick, which the
frontend forwards to the game like any other pointer source.
"""

import math
from typing import Dict, List, Optional, Tuple

from .settings import CURSOR_SPEED, KEY_HOLD_FRAMES, NAME_MAX_LEN

_ARROWS = {
    'KEY_UP': 'w',
    'KEY_DOWN': 's',
    'KEY_LEFT': 'a',
    'KEY_RIGHT': 'd',
}


class InputHandler:
    """
    Collects key presses from blessed's inkey().

    Terminals don't report key-up, so a press counts as held for a few
    frames and each repeat refreshes the timer.
    """

    def __init__(self, hold_duration: int = KEY_HOLD_FRAMES):
        self.keys_held: Dict[str, int] = {}  # key -> frames remaining
        self.hold_duration = hold_duration
        self.actions: List[str] = []

    def process_key(self, key) -> None:
        """Process one key while the blade is live."""
        if key is None or not key:
            return

        key_str = key.lower() if not key.is_sequence else ''
        direction = _ARROWS.get(key.name) if key.is_sequence else None
        if direction is None and key_str and key_str in 'wasd':
            direction = key_str

        if direction:
            self.keys_held[direction] = self.hold_duration
        elif key_str == 'p':
            self.actions.append('pause')
        elif key_str == 'q' or key.name == 'KEY_ESCAPE':
            self.actions.append('quit')
        elif key_str == 'f' or key.name == 'KEY_F1':
            self.actions.append('toggle_fps')

    def update(self) -> None:
        """Age key hold timers (call once per tick)."""
        expired = []
        for key, frames in self.keys_held.items():
            self.keys_held[key] = frames - 1
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

    def release_all(self) -> None:
        self.keys_held.clear()

    def get_movement_vector(self) -> Tuple[float, float]:
        dx, dy = 0.0, 0.0
        if 'w' in self.keys_held:
            dy -= 1
        if 's' in self.keys_held:
            dy += 1
        if 'a' in self.keys_held:
            dx -= 1
        if 'd' in self.keys_held:
            dx += 1

        if dx != 0 and dy != 0:
            length = math.sqrt(dx * dx + dy * dy)
            dx /= length
            dy /= length

        return dx, dy

    def consume_actions(self) -> List[str]:
        actions = self.actions
        self.actions = []
        return actions


class BladeCursor:
    """Pointer position in virtual pixels, clamped to the playfield."""

    def __init__(self, width: float, height: float, speed: float = CURSOR_SPEED):
        self.width = width
        self.height = height
        self.speed = speed
        self.x = width / 2
        self.y = height / 2

    def resize(self, width: float, height: float):
        self.width = width
        self.height = height
        self.x = min(self.x, width)
        self.y = min(self.y, height)

    def step(self, dx: float, dy: float) -> Optional[Tuple[float, float]]:
        """Move one tick; returns the new sample, or None when idle."""
        if dx == 0 and dy == 0:
            return None
        self.x = max(0.0, min(self.width, self.x + dx * self.speed))
        self.y = max(0.0, min(self.height, self.y + dy * self.speed))
        return self.x, self.y


class NameEntry:
    """Name field on the game-over screen."""

    def __init__(self, max_len: int = NAME_MAX_LEN):
        self.max_len = max_len
        self.text = ''

    def process_key(self, key) -> Optional[str]:
        """
        Edit the field. Returns 'submit', 'restart' or 'home' when the key
        is a command instead of text.
        """
        if key.name == 'KEY_ENTER':
            return 'submit'
        if key.name == 'KEY_TAB':
            return 'restart'
        if key.name == 'KEY_ESCAPE':
            return 'home'
        if key.name in ('KEY_BACKSPACE', 'KEY_DELETE'):
            self.text = self.text[:-1]
            return None
        if not key.is_sequence and str(key).isprintable() and len(self.text) < self.max_len:
            self.text += str(key)
        return None
