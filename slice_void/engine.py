"""
Rendering Engine
=================
Double-buffered terminal renderer for the slicing field.

The simulation works in virtual pixels. One character cell covers
CELL_WIDTH_PX x CELL_HEIGHT_PX of them, and a braille dot a 2x4
subdivision of a cell, which is what the blade and fading particles use.
"""

import math
import random
from dataclasses import dataclass
from typing import List, Tuple

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")

from .settings import (
    CELL_WIDTH_PX, CELL_HEIGHT_PX, HUD_ROWS, WHITE, GRAY_DARK
)


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7
    bg_color: int = -1  # -1 = terminal default

    def same_as(self, other: 'Cell') -> bool:
        return (self.char, self.fg_color, self.bg_color) == \
            (other.char, other.fg_color, other.bg_color)

    def blank(self):
        self.char = ' '
        self.fg_color = 7
        self.bg_color = -1


class DoubleBuffer:
    """
    Draw into the back grid, then emit escape sequences only for cells that
    differ from what is already on screen.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.front: List[List[Cell]] = self._grid()
        self.back: List[List[Cell]] = self._grid()

    def _grid(self) -> List[List[Cell]]:
        return [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self.front = self._grid()
        self.back = self._grid()

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.blank()

    def put(self, x: int, y: int, char: str, fg_color: int = 7, bg_color: int = -1):
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color
            cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7, bg_color: int = -1):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, bg_color)

    def present(self, term: Terminal) -> str:
        """Swap buffers and return the output for changed cells."""
        parts = []
        for y in range(self.height):
            back_row = self.back[y]
            front_row = self.front[y]
            for x in range(self.width):
                cell = back_row[x]
                if cell.same_as(front_row[x]):
                    continue
                parts.append(term.move_xy(x, y))
                parts.append(term.normal)
                if cell.bg_color >= 0:
                    parts.append(term.on_color(cell.bg_color))
                parts.append(term.color(cell.fg_color))
                parts.append(cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(parts)


class BrailleCanvas:
    """
    Sub-cell dots using Unicode braille: every cell is a 2x4 dot grid.
    """

    # (dot column, dot row) -> bit
    BITS = {
        (0, 0): 0x01, (0, 1): 0x02, (0, 2): 0x04, (0, 3): 0x40,
        (1, 0): 0x08, (1, 1): 0x10, (1, 2): 0x20, (1, 3): 0x80,
    }
    BASE = 0x2800

    def __init__(self, char_width: int, char_height: int):
        self.char_width = char_width
        self.char_height = char_height
        self.dots: dict = {}  # (cx, cy) -> (pattern, color)

    def clear(self):
        self.dots = {}

    def set_dot(self, dx: int, dy: int, color: int = WHITE):
        """Light the dot at dot coordinates (2 per cell across, 4 down)."""
        cx, cy = dx // 2, dy // 4
        if not (0 <= cx < self.char_width and 0 <= cy < self.char_height):
            return
        pattern, _ = self.dots.get((cx, cy), (0, color))
        self.dots[(cx, cy)] = (pattern | self.BITS[(dx % 2, dy % 4)], color)

    def blit_to_buffer(self, buffer: DoubleBuffer):
        """Overlay dots onto cells that are still empty."""
        for (cx, cy), (pattern, color) in self.dots.items():
            if buffer.back[cy][cx].char == ' ':
                buffer.put(cx, cy, chr(self.BASE + pattern), color)


class GameRenderer:
    """
    Maps virtual-pixel game coordinates onto the terminal, with screen
    shake. The HUD rows at the bottom never shake.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.buffer = DoubleBuffer(term.width, term.height)
        self.braille = BrailleCanvas(term.width, term.height - HUD_ROWS)
        self.shake_x = 0
        self.shake_y = 0
        self.show_fps = False
        self.current_fps = 60.0

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Rows available to the playfield (everything above the HUD)."""
        return self.buffer.height - HUD_ROWS

    def field_size_px(self) -> Tuple[float, float]:
        """Playfield size in virtual pixels."""
        return self.width * CELL_WIDTH_PX, self.game_height * CELL_HEIGHT_PX

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)
        self.braille = BrailleCanvas(width, height - HUD_ROWS)

    def begin_frame(self, shaking: bool = False, intensity: int = 2):
        self.buffer.clear_back()
        self.braille.clear()
        if shaking:
            self.shake_x = random.randint(-intensity, intensity)
            self.shake_y = random.randint(-max(1, intensity // 2), max(1, intensity // 2))
        else:
            self.shake_x = 0
            self.shake_y = 0

    def end_frame(self) -> str:
        self.braille.blit_to_buffer(self.buffer)
        return self.buffer.present(self.term)

    # -------------------------------------------------------------------------
    # Cell drawing
    # -------------------------------------------------------------------------

    def put(self, x: int, y: int, char: str, fg_color: int = 7,
            with_shake: bool = True):
        if with_shake and y < self.game_height:
            x += self.shake_x
            y += self.shake_y
            if y >= self.game_height:
                return
        self.buffer.put(x, y, char, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7,
                   with_shake: bool = False):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, with_shake)

    def put_centered(self, y: int, text: str, fg_color: int = 7):
        self.put_string(self.width // 2 - len(text) // 2, y, text, fg_color)

    def draw_box(self, x: int, y: int, w: int, h: int, color: int = GRAY_DARK,
                 char: str = '#', with_shake: bool = True):
        for i in range(w):
            self.put(x + i, y, char, color, with_shake)
            self.put(x + i, y + h - 1, char, color, with_shake)
        for j in range(1, h - 1):
            self.put(x, y + j, char, color, with_shake)
            self.put(x + w - 1, y + j, char, color, with_shake)

    # -------------------------------------------------------------------------
    # Pixel-space drawing
    # -------------------------------------------------------------------------

    def put_px(self, px: float, py: float, char: str, fg_color: int = 7):
        """Draw a character at the cell containing virtual pixel (px, py)."""
        x = math.floor(px / CELL_WIDTH_PX)
        y = math.floor(py / CELL_HEIGHT_PX)
        if 0 <= y < self.game_height:
            self.put(x, y, char, fg_color)

    def dot_px(self, px: float, py: float, color: int = WHITE):
        """Light the braille dot under virtual pixel (px, py)."""
        dx = math.floor(px * 2 / CELL_WIDTH_PX) + self.shake_x * 2
        dy = math.floor(py * 4 / CELL_HEIGHT_PX) + self.shake_y * 4
        self.braille.set_dot(dx, dy, color)

    def line_px(self, x0: float, y0: float, x1: float, y1: float,
                color: int = WHITE):
        """Braille line between two virtual-pixel points."""
        step = min(CELL_WIDTH_PX / 2, CELL_HEIGHT_PX / 4)
        steps = max(1, int(math.hypot(x1 - x0, y1 - y0) / step))
        for i in range(steps + 1):
            t = i / steps
            self.dot_px(x0 + (x1 - x0) * t, y0 + (y1 - y0) * t, color)
