"""
Particle System
================
Decorative slice feedback: bursts that fly out, sag under gravity, slow
down and fade. Particles never take part in collision.
"""

import math
import random
from typing import Sequence

from .ecs import World
from .components import (
    Position, Velocity, Gravity, Drag, Fade,
    ParticleTag, ParticleShape, Renderable
)
from .settings import (
    PARTICLE_GRAVITY, PARTICLE_DRAG, PARTICLE_DECAY,
    PARTICLE_SPEED, PARTICLE_SIZE
)

_SHAPE_GLYPHS = {
    ParticleShape.CIRCLE: 'o',
    ParticleShape.STAR: '*',
}


def spawn_particle(world: World, rng: random.Random,
                   x: float, y: float, color: int) -> int:
    """Spawn one particle flying off in a random direction."""
    angle = rng.uniform(0, math.pi * 2)
    speed = rng.uniform(*PARTICLE_SPEED)
    shape = ParticleShape.STAR if rng.random() > 0.5 else ParticleShape.CIRCLE

    return world.create_entity(
        Position(x, y),
        Velocity(math.cos(angle) * speed, math.sin(angle) * speed),
        Gravity(PARTICLE_GRAVITY),
        Drag(PARTICLE_DRAG),
        Fade(1.0, PARTICLE_DECAY),
        ParticleTag(shape=shape, size=rng.uniform(*PARTICLE_SIZE)),
        Renderable(glyph=_SHAPE_GLYPHS[shape], color=color),
    )


def spawn_burst(world: World, rng: random.Random, x: float, y: float,
                count: int, colors: Sequence[int]) -> int:
    """
    Spawn `count` particles per color at (x, y), colors interleaved.
    Returns the number spawned.
    """
    spawned = 0
    for _ in range(count):
        for color in colors:
            spawn_particle(world, rng, x, y, color)
            spawned += 1
    return spawned


def particle_system(world: World):
    """
    Drag and fade for particles. Position and gravity are handled by the
    shared motion system, which must run first.
    """
    for entity_id, vel, drag in world.query(Velocity, Drag):
        vel.x *= drag.value
        vel.y *= drag.value

    for entity_id, fade in world.query(Fade):
        fade.life -= fade.decay
        if fade.life <= 0:
            world.destroy_entity(entity_id)
