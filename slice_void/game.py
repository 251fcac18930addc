"""
Game State Machine
===================
Owns the session and decides, per state, which systems run each tick.

    MENU ──start──> PLAYING ──pause──> PAUSED ──resume──> PLAYING
                      │                  │
                 lives == 0            home ──> MENU
                      v
                  GAME_OVER ──restart──> PLAYING
                      └──submit / home──> MENU

Every transition bumps `epoch`, which cancels any follow-up toss that was
scheduled before it. Calls that make no sense for the current state are
ignored.
"""

import datetime
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .ecs import World
from .clock import Clock
from .components import (
    Position, SliceTarget, Spin, Renderable, Fade, ParticleTag
)
from .blade import BladeTrail, collision_system
from .freeze import FreezeTimer
from .physics import motion_system
from .particles import particle_system
from .effects import resolve_hit, cull_system
from .spawner import spawn_system, idle_spawn_system, launch_opening_tosses
from .leaderboard import (
    LeaderboardStore, LeaderboardEntry, LeaderboardError
)
from .settings import START_LIVES, SHAKE_MS, NAME_MAX_LEN

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    MENU = 'menu'
    PLAYING = 'playing'
    PAUSED = 'paused'
    GAME_OVER = 'game_over'


@dataclass
class GameSession:
    """Everything that belongs to one run. Replaced on every new game."""
    width: float
    height: float
    world: World = field(default_factory=World)
    blade: BladeTrail = field(default_factory=BladeTrail)
    freeze: FreezeTimer = field(default_factory=FreezeTimer)
    score: int = 0
    lives: int = START_LIVES
    dropped_fruit: int = 0
    last_spawn_ms: float = 0.0
    pending_spawns: list = field(default_factory=list)


# =============================================================================
# SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class EntityView:
    entity_id: int
    kind: str
    x: float
    y: float
    rotation: float
    radius: float
    variant: str
    glyph: str
    color: int


@dataclass(frozen=True)
class ParticleView:
    x: float
    y: float
    color: int
    opacity: float
    shape: str
    size: float


@dataclass(frozen=True)
class Snapshot:
    """Everything the presentation layer needs for one frame."""
    phase: GamePhase
    score: int
    lives: int
    freeze_seconds: int
    shaking: bool
    entities: Tuple[EntityView, ...]
    particles: Tuple[ParticleView, ...]
    blade: Tuple[Tuple[float, float, float], ...]


# =============================================================================
# STATE MACHINE
# =============================================================================

class GameStateMachine:
    """Drives one game: menu idle animation, play, pause and game over."""

    def __init__(self, width: float, height: float,
                 clock: Optional[Clock] = None,
                 rng: Optional[random.Random] = None,
                 store: Optional[LeaderboardStore] = None):
        self.width = width
        self.height = height
        self.clock = clock if clock is not None else Clock()
        self.rng = rng if rng is not None else random.Random()
        self.store = store if store is not None else LeaderboardStore()

        self.phase = GamePhase.MENU
        self.epoch = 0
        self.session: Optional[GameSession] = None
        self.shake_until_ms = 0.0

        self.menu_world = World()
        launch_opening_tosses(self.menu_world, self.rng, width, height)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _transition(self, phase: GamePhase):
        logger.info('State %s -> %s', self.phase.name, phase.name)
        self.phase = phase
        self.epoch += 1

    def start_game(self):
        """Start a fresh run from the menu, or restart after game over."""
        if self.phase not in (GamePhase.MENU, GamePhase.GAME_OVER):
            logger.debug('start_game ignored in %s', self.phase.name)
            return
        self.session = GameSession(width=self.width, height=self.height,
                                   last_spawn_ms=self.clock.now_ms())
        self.shake_until_ms = 0.0
        self.menu_world = World()
        self._transition(GamePhase.PLAYING)

    def pause_game(self):
        if self.phase is not GamePhase.PLAYING:
            logger.debug('pause_game ignored in %s', self.phase.name)
            return
        self.session.freeze.suspend(self.clock.now_ms())
        self.session.blade.clear()
        self._transition(GamePhase.PAUSED)

    def resume_game(self):
        if self.phase is not GamePhase.PAUSED:
            logger.debug('resume_game ignored in %s', self.phase.name)
            return
        self.session.freeze.resume(self.clock.now_ms())
        self._transition(GamePhase.PLAYING)

    def go_home(self):
        """Abandon a paused run, or leave the game-over screen."""
        if self.phase not in (GamePhase.PAUSED, GamePhase.GAME_OVER):
            logger.debug('go_home ignored in %s', self.phase.name)
            return
        self.session = None
        self.menu_world = World()
        launch_opening_tosses(self.menu_world, self.rng, self.width, self.height)
        self._transition(GamePhase.MENU)

    def _end_game(self):
        self.session.blade.clear()
        logger.info('Game over with score %d', self.session.score)
        self._transition(GamePhase.GAME_OVER)

    def submit_score(self, name: str):
        """Record the finished run under `name` and return to the menu."""
        if self.phase is not GamePhase.GAME_OVER:
            logger.debug('submit_score ignored in %s', self.phase.name)
            return
        name = name.strip()[:NAME_MAX_LEN]
        if not name:
            return

        entry = LeaderboardEntry(name=name, score=self.session.score,
                                 date=datetime.date.today().isoformat())
        try:
            self.store.submit(entry)
        except LeaderboardError:
            logger.exception('Score for %s was not saved', name)
        self.go_home()

    def on_pointer_sample(self, x: float, y: float):
        """Feed one pointer sample to the blade (only while live)."""
        if self.phase is not GamePhase.PLAYING:
            return
        if self.session.freeze.is_active(self.clock.now_ms()):
            return
        self.session.blade.append(x, y)

    def resize(self, width: float, height: float):
        self.width = width
        self.height = height
        if self.session is not None:
            self.session.width = width
            self.session.height = height

    def leaderboard(self) -> List[LeaderboardEntry]:
        return self.store.load()

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def tick(self):
        """Advance the simulation by one frame."""
        if self.phase is GamePhase.MENU:
            self._tick_menu()
        elif self.phase is GamePhase.PLAYING:
            self._tick_playing()
        # PAUSED and GAME_OVER hold the last frame still

    def _tick_menu(self):
        world = self.menu_world
        idle_spawn_system(world, self.rng, self.width, self.height)
        motion_system(world)
        world.process_dead_entities()

    def _tick_playing(self):
        now = self.clock.now_ms()
        session = self.session
        world = session.world

        spawn_system(session, self.rng, now, self.epoch)

        motion_system(world)
        particle_system(world)

        events = []
        if session.freeze.is_active(now):
            session.blade.clear()
        else:
            session.blade.decay()
            for entity_id in collision_system(world, session.blade):
                events += resolve_hit(session, entity_id, self.rng, now)

        events += cull_system(session)
        world.process_dead_entities()

        self._handle_events(events, now)

    def _handle_events(self, events: List[dict], now_ms: float):
        for event in events:
            if event['type'] == 'life_lost':
                self.shake_until_ms = now_ms + SHAKE_MS
            elif event['type'] == 'ice_hit':
                self.session.blade.clear()

        if self.session.lives <= 0:
            self._end_game()

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        now = self.clock.now_ms()
        session = self.session

        if self.phase is GamePhase.MENU or session is None:
            return Snapshot(
                phase=self.phase, score=0, lives=0, freeze_seconds=0, shaking=False,
                entities=self._entity_views(self.menu_world),
                particles=(), blade=(),
            )

        paused = self.phase is GamePhase.PAUSED
        if self.phase is GamePhase.GAME_OVER:
            freeze_seconds = 0
        else:
            freeze_seconds = session.freeze.seconds_left(now, paused=paused)
        return Snapshot(
            phase=self.phase,
            score=session.score,
            lives=session.lives,
            freeze_seconds=freeze_seconds,
            shaking=now < self.shake_until_ms,
            entities=self._entity_views(session.world),
            particles=self._particle_views(session.world),
            blade=tuple((p.x, p.y, p.life) for p in session.blade.points),
        )

    @staticmethod
    def _entity_views(world: World) -> Tuple[EntityView, ...]:
        views = []
        for entity_id, pos, target, spin, rend in world.query(
            Position, SliceTarget, Spin, Renderable
        ):
            views.append(EntityView(
                entity_id=entity_id, kind=target.kind.value,
                x=pos.x, y=pos.y, rotation=spin.angle, radius=target.radius,
                variant=rend.variant, glyph=rend.glyph, color=rend.color,
            ))
        return tuple(views)

    @staticmethod
    def _particle_views(world: World) -> Tuple[ParticleView, ...]:
        views = []
        for _, pos, fade, tag, rend in world.query(
            Position, Fade, ParticleTag, Renderable
        ):
            views.append(ParticleView(
                x=pos.x, y=pos.y, color=rend.color,
                opacity=max(0.0, min(1.0, fade.life)),
                shape=tag.shape.value, size=tag.size,
            ))
        return tuple(views)
