"""
Effect Resolution
==================
Turns blade hits and dropped fruit into score, lives, freeze time and
particles. Every function mutates the session it is given and returns
event dicts for the state machine (shake, logging, game over).
"""

import logging
import random
from typing import List, TYPE_CHECKING

from .components import Position, Velocity, SliceTarget, Renderable, EntityKind
from .particles import spawn_burst
from .settings import (
    FRUIT_SCORE, FRUIT_BURST, BOMB_BURST, ICE_BURST,
    BOMB_BURST_COLORS, ICE_BURST_COLORS,
    DROP_PENALTY_THRESHOLD, EXIT_MARGIN,
)

if TYPE_CHECKING:
    from .game import GameSession

logger = logging.getLogger(__name__)


def apply_damage(session: 'GameSession', cause: str) -> List[dict]:
    """Shared damage path for bomb hits and the drop penalty."""
    if session.lives <= 0:
        return []
    session.lives -= 1
    logger.debug('Life lost (%s), %d left', cause, session.lives)
    return [{'type': 'life_lost', 'cause': cause, 'lives': session.lives}]


def resolve_hit(session: 'GameSession', entity_id: int, rng: random.Random,
                now_ms: float) -> List[dict]:
    """Apply the effect of slicing one target, dispatched on its kind."""
    world = session.world
    target = world.get_component(entity_id, SliceTarget)
    pos = world.get_component(entity_id, Position)
    if target is None or pos is None:
        return []

    rend = world.get_component(entity_id, Renderable)
    world.destroy_entity(entity_id)

    if target.kind is EntityKind.FRUIT:
        session.score += FRUIT_SCORE
        spawn_burst(world, rng, pos.x, pos.y, FRUIT_BURST, (rend.color,))
        return [{'type': 'fruit_sliced', 'x': pos.x, 'y': pos.y,
                 'score': session.score}]

    if target.kind is EntityKind.BOMB:
        spawn_burst(world, rng, pos.x, pos.y,
                    BOMB_BURST // len(BOMB_BURST_COLORS), BOMB_BURST_COLORS)
        events = [{'type': 'bomb_hit', 'x': pos.x, 'y': pos.y}]
        return events + apply_damage(session, 'bomb')

    if target.kind is EntityKind.ICE:
        duration = session.freeze.register_hit(now_ms)
        spawn_burst(world, rng, pos.x, pos.y, ICE_BURST, ICE_BURST_COLORS)
        logger.debug('Ice hit #%d adds %.0f ms (ends at %.0f)',
                     session.freeze.ice_hits, duration, session.freeze.end_ms)
        return [{'type': 'ice_hit', 'x': pos.x, 'y': pos.y,
                 'duration_ms': duration}]

    return []


def cull_system(session: 'GameSession') -> List[dict]:
    """
    Remove sliced targets and targets that fell out of the bottom.
    Unsliced fruit falling out counts toward the drop penalty; every
    third one in a row costs a life.
    """
    world = session.world
    limit = session.height + EXIT_MARGIN
    events = []

    for entity_id, pos, vel, target in world.query(Position, Velocity, SliceTarget):
        if target.sliced:
            world.destroy_entity(entity_id)
            continue
        if pos.y <= limit or vel.y <= 0:
            continue

        world.destroy_entity(entity_id)
        if target.kind is not EntityKind.FRUIT:
            continue

        session.dropped_fruit += 1
        events.append({'type': 'fruit_dropped', 'count': session.dropped_fruit})
        if session.dropped_fruit >= DROP_PENALTY_THRESHOLD:
            session.dropped_fruit = 0
            events += apply_damage(session, 'drop')

    return events
