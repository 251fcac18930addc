"""
Spawn Scheduling
=================
Decides when targets are tossed during play and drives the menu's idle
animation.

Cadence tightens with score but never drops below one toss per 500 ms.
Occasionally a second toss follows 250 ms later; that follow-up is tagged
with the state-machine epoch and silently dropped if any state transition
happened in between.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, TYPE_CHECKING

from .ecs import World
from .components import Position, Velocity, IdleTag
from .targets import toss_target, create_idle_fruit
from .settings import (
    SPAWN_BASE_MS, SPAWN_MIN_MS, SPAWN_SCORE_FACTOR_MS,
    DOUBLE_SPAWN_CHANCE, DOUBLE_SPAWN_DELAY_MS,
    MENU_SPAWN_CHANCE, MENU_VY_RANGE, MENU_VX_SPREAD, MENU_EXIT_MARGIN,
    MENU_OPENING_TOSSES, LAUNCH_DEPTH, SPAWN_MARGIN_X,
)

if TYPE_CHECKING:
    from .game import GameSession

logger = logging.getLogger(__name__)


@dataclass
class DeferredSpawn:
    """A follow-up toss waiting for its fire time."""
    fire_at_ms: float
    epoch: int


def spawn_interval(score: int) -> float:
    """Milliseconds between tosses at the given score."""
    return max(SPAWN_MIN_MS, SPAWN_BASE_MS - score * SPAWN_SCORE_FACTOR_MS)


# =============================================================================
# PLAY
# =============================================================================

def spawn_system(session: 'GameSession', rng: random.Random,
                 now_ms: float, epoch: int) -> List[int]:
    """
    Run one tick of the play-mode scheduler. Only called while PLAYING;
    `epoch` identifies the current PLAYING stretch.

    Returns the ids of all targets created this tick.
    """
    spawned = _fire_deferred(session, rng, now_ms, epoch)

    if now_ms - session.last_spawn_ms > spawn_interval(session.score):
        spawned.append(toss_target(
            session.world, rng, session.width, session.height, session.score
        ))
        if rng.random() < DOUBLE_SPAWN_CHANCE:
            session.pending_spawns.append(
                DeferredSpawn(now_ms + DOUBLE_SPAWN_DELAY_MS, epoch)
            )
        session.last_spawn_ms = now_ms

    return spawned


def _fire_deferred(session: 'GameSession', rng: random.Random,
                   now_ms: float, epoch: int) -> List[int]:
    """Fire due follow-up tosses; discard any from an earlier epoch."""
    spawned = []
    waiting = []

    for task in session.pending_spawns:
        if task.epoch != epoch:
            logger.debug('Dropped follow-up toss from epoch %d', task.epoch)
            continue
        if now_ms >= task.fire_at_ms:
            spawned.append(toss_target(
                session.world, rng, session.width, session.height, session.score
            ))
        else:
            waiting.append(task)

    session.pending_spawns = waiting
    return spawned


# =============================================================================
# MENU IDLE ANIMATION
# =============================================================================

def launch_opening_tosses(world: World, rng: random.Random,
                          width: float, height: float) -> List[int]:
    """The three fruits that fly up when the menu opens."""
    return [
        create_idle_fruit(world, rng, width * fraction, height + LAUNCH_DEPTH, vx, vy)
        for fraction, vx, vy in MENU_OPENING_TOSSES
    ]


def idle_spawn_system(world: World, rng: random.Random,
                      width: float, height: float) -> None:
    """Sparse decorative tosses, then cull what has fallen away."""
    if rng.random() < MENU_SPAWN_CHANCE:
        x = rng.uniform(SPAWN_MARGIN_X, width - SPAWN_MARGIN_X)
        vy = -rng.uniform(*MENU_VY_RANGE)
        vx = (rng.random() - 0.5) * MENU_VX_SPREAD
        create_idle_fruit(world, rng, x, height + LAUNCH_DEPTH, vx, vy)

    for entity_id, pos, vel, _ in world.query(Position, Velocity, IdleTag):
        if pos.y > height + MENU_EXIT_MARGIN and vel.y > 0:
            world.destroy_entity(entity_id)
