"""
Target Archetypes
==================
Entity creation for the three things that get tossed.

    FRUIT - score on slice, costs a life every 3rd drop
    BOMB  - costs a life on slice
    ICE   - freezes the blade on slice
"""

import random
from typing import Dict, Tuple

from .ecs import World
from .components import (
    Position, Velocity, Gravity, Spin,
    SliceTarget, Renderable, EntityKind, IdleTag
)
from .physics import Toss, compute_toss
from .settings import (
    FRUIT_RADIUS, BOMB_RADIUS, ICE_RADIUS, BOMB_GRAY, ICE_BLUE, ROT_JITTER,
    BOMB_CHANCE, ICE_CHANCE, BASE_GRAVITY,
)


# variant -> (glyph, color)
FRUIT_VARIANTS: Dict[str, Tuple[str, int]] = {
    'watermelon': ('W', 203),
    'orange': ('O', 214),
    'kiwi': ('K', 159),
    'strawberry': ('S', 217),
    'grape': ('G', 147),
    'peach': ('P', 223),
    'pineapple': ('A', 229),
    'coconut': ('C', 255),
    'apple': ('Q', 210),
}

# kind -> (glyph, color, radius) for the non-fruit kinds
HAZARD_LOOKS: Dict[EntityKind, Tuple[str, int, float]] = {
    EntityKind.BOMB: ('@', BOMB_GRAY, BOMB_RADIUS),
    EntityKind.ICE: ('#', ICE_BLUE, ICE_RADIUS),
}


def draw_kind(rng: random.Random) -> EntityKind:
    """Weighted draw: 10% bomb, 40% ice, 50% fruit."""
    roll = rng.random()
    if roll < BOMB_CHANCE:
        return EntityKind.BOMB
    if roll < BOMB_CHANCE + ICE_CHANCE:
        return EntityKind.ICE
    return EntityKind.FRUIT


def has_live_ice(world: World) -> bool:
    """True if an unsliced ICE target is currently in flight."""
    for _, target in world.query(SliceTarget):
        if target.kind is EntityKind.ICE and not target.sliced:
            return True
    return False


def create_target(world: World, rng: random.Random, kind: EntityKind,
                  toss: Toss) -> int:
    """Create a target entity of the given kind on the given trajectory."""
    if kind is EntityKind.FRUIT:
        variant = rng.choice(list(FRUIT_VARIANTS))
        glyph, color = FRUIT_VARIANTS[variant]
        radius = FRUIT_RADIUS
    else:
        variant = kind.value
        glyph, color, radius = HAZARD_LOOKS[kind]

    return world.create_entity(
        Position(toss.x, toss.y),
        Velocity(toss.vx, toss.vy),
        Gravity(toss.gravity),
        Spin(0.0, toss.spin_speed),
        SliceTarget(kind=kind, radius=radius),
        Renderable(glyph=glyph, color=color, variant=variant),
    )


def toss_target(world: World, rng: random.Random, width: float, height: float,
                score: int) -> int:
    """
    Launch a random target. At most one live ICE is allowed, so a second
    ICE is redrawn as FRUIT. Targets created earlier in the same tick count.
    """
    toss = compute_toss(rng, width, height, score)
    kind = draw_kind(rng)
    if kind is EntityKind.ICE and has_live_ice(world):
        kind = EntityKind.FRUIT
    return create_target(world, rng, kind, toss)


def create_idle_fruit(world: World, rng: random.Random, x: float, y: float,
                      vx: float, vy: float) -> int:
    """Decorative menu fruit with a hand-picked launch velocity."""
    toss = Toss(x=x, y=y, vx=vx, vy=vy, gravity=BASE_GRAVITY,
                spin_speed=(rng.random() - 0.5) * ROT_JITTER, peak_y=y)
    entity_id = create_target(world, rng, EntityKind.FRUIT, toss)
    world.add_component(entity_id, IdleTag())
    return entity_id
