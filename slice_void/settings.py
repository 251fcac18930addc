"""
Game Settings
==============
Tunable constants for the simulation and the terminal frontend.

Distances are virtual pixels, velocities are pixels per tick and all
timers are wall-clock milliseconds.
"""

import os
from pathlib import Path


# =============================================================================
# PALETTE (ANSI 256)
# =============================================================================

NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_PINK = 199

ICE_BLUE = 123
BOMB_GRAY = 240

GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255


# =============================================================================
# FRONTEND
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
MIN_WIDTH = 60
MIN_HEIGHT = 20
HUD_ROWS = 3

# One terminal cell covers this many virtual pixels
CELL_WIDTH_PX = 10
CELL_HEIGHT_PX = 20

CURSOR_SPEED = 26.0  # Blade cursor pixels per tick
KEY_HOLD_FRAMES = 12
SHAKE_MS = 500

LOG_FILE = os.environ.get('SLICE_VOID_LOG', 'slice_void.log')
LOG_LEVEL = os.environ.get('SLICE_VOID_LOG_LEVEL', 'INFO')


# =============================================================================
# PHYSICS
# =============================================================================

BASE_GRAVITY = 0.25
SPEED_STEP_SCORE = 50  # Every 50 points...
SPEED_STEP_BONUS = 0.1  # ...gravity and spin grow by 10%

SAFE_TOP_Y = 200  # Peaks never rise above this
PEAK_MAX_FRACTION = 0.65  # ...and never stay below 65% of the viewport
LAUNCH_DEPTH = 80  # Spawn this far below the bottom edge
EXIT_MARGIN = 80  # Descending entities past this are gone
SPAWN_MARGIN_X = 60

CENTER_BIAS = 0.002
VX_JITTER = 4.0
ROT_JITTER = 0.15

FRUIT_RADIUS = 40
BOMB_RADIUS = 35
ICE_RADIUS = 35


# =============================================================================
# SPAWNING
# =============================================================================

SPAWN_BASE_MS = 1100
SPAWN_MIN_MS = 500
SPAWN_SCORE_FACTOR_MS = 1.5

BOMB_CHANCE = 0.1
ICE_CHANCE = 0.4  # Cumulative threshold is BOMB_CHANCE + ICE_CHANCE

DOUBLE_SPAWN_CHANCE = 0.1
DOUBLE_SPAWN_DELAY_MS = 250

# Idle animation on the menu
MENU_SPAWN_CHANCE = 0.03
MENU_VY_RANGE = (8.0, 14.0)
MENU_VX_SPREAD = 3.0
MENU_EXIT_MARGIN = 100
# (fraction of width, vx, vy) for the fruits launched when the menu opens
MENU_OPENING_TOSSES = (
    (0.25, 1.2, -13.0),
    (0.5, 0.0, -15.0),
    (0.75, -1.2, -13.0),
)


# =============================================================================
# BLADE
# =============================================================================

BLADE_MAX_POINTS = 7
BLADE_DECAY = 0.15


# =============================================================================
# SCORING, LIVES, FREEZE
# =============================================================================

FRUIT_SCORE = 10
START_LIVES = 3
DROP_PENALTY_THRESHOLD = 3

FREEZE_STEP_MS = 3000  # Duration grows by this per cumulative ice hit
FREEZE_CAP_MS = 9000  # Per-hit cap; stacked freezes may exceed it


# =============================================================================
# PARTICLES
# =============================================================================

PARTICLE_GRAVITY = 0.2
PARTICLE_DRAG = 0.96
PARTICLE_DECAY = 0.02
PARTICLE_SPEED = (2.0, 8.0)
PARTICLE_SIZE = (4.0, 12.0)

FRUIT_BURST = 10
BOMB_BURST = 20
ICE_BURST = 15  # Per colour

BOMB_BURST_COLORS = (BOMB_GRAY, NEON_RED)
ICE_BURST_COLORS = (ICE_BLUE, WHITE)


# =============================================================================
# LEADERBOARD
# =============================================================================

LEADERBOARD_KEY = 'slice-void-scores-v4'
LEADERBOARD_SIZE = 5
LEADERBOARD_MENU_ROWS = 3
NAME_MAX_LEN = 8
SCORES_PATH = Path(os.environ.get(
    'SLICE_VOID_SCORES',
    Path.home() / '.slice_void' / 'scores.json',
))
