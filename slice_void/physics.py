"""
Toss Physics
=============
Trajectory parameters for launched targets and the per-tick integrator.

A toss is tuned so that, under its own gravity, the target decelerates to
zero vertical speed right at a chosen apex height (v = sqrt(2 * g * h)).
Gravity and spin both scale with the score in steps of 50 points.
"""

import math
import random
from dataclasses import dataclass

from .ecs import World
from .components import Position, Velocity, Gravity, Spin
from .settings import (
    BASE_GRAVITY, SPEED_STEP_SCORE, SPEED_STEP_BONUS,
    SAFE_TOP_Y, PEAK_MAX_FRACTION, LAUNCH_DEPTH, SPAWN_MARGIN_X,
    CENTER_BIAS, VX_JITTER, ROT_JITTER,
)


@dataclass
class Toss:
    """Launch parameters for one target."""
    x: float
    y: float
    vx: float
    vy: float
    gravity: float
    spin_speed: float
    peak_y: float


def speed_multiplier(score: int) -> float:
    """Difficulty factor: +10% for every full 50 points."""
    return 1 + (score // SPEED_STEP_SCORE) * SPEED_STEP_BONUS


def launch_velocity(gravity: float, start_y: float, peak_y: float) -> float:
    """Initial (negative, upward) vertical speed that stops exactly at peak_y."""
    dist = start_y - peak_y
    return -math.sqrt(2 * gravity * max(0.0, dist))


def compute_toss(rng: random.Random, width: float, height: float, score: int) -> Toss:
    """Pick a launch point, apex and spin for a target at the given score."""
    multiplier = speed_multiplier(score)

    x = rng.uniform(SPAWN_MARGIN_X, width - SPAWN_MARGIN_X)
    y = height + LAUNCH_DEPTH

    # Nudge toward the middle so targets don't keep leaving on one side
    center_bias = (width / 2 - x) * CENTER_BIAS
    vx = (rng.random() - 0.5) * VX_JITTER + center_bias * VX_JITTER

    peak_y = rng.uniform(SAFE_TOP_Y, height * PEAK_MAX_FRACTION)
    gravity = BASE_GRAVITY * multiplier
    vy = launch_velocity(gravity, y, peak_y)

    spin_speed = (rng.random() - 0.5) * ROT_JITTER * multiplier

    return Toss(x=x, y=y, vx=vx, vy=vy, gravity=gravity,
                spin_speed=spin_speed, peak_y=peak_y)


def motion_system(world: World):
    """
    Integrate every moving entity by one tick:
    x += vx; y += vy; vy += gravity; angle += spin.
    """
    for entity_id, pos, vel in world.query(Position, Velocity):
        pos.x += vel.x
        pos.y += vel.y

        gravity = world.get_component(entity_id, Gravity)
        if gravity:
            vel.y += gravity.strength

        spin = world.get_component(entity_id, Spin)
        if spin:
            spin.angle += spin.speed
