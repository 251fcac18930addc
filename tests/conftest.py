import random

import pytest

from slice_void.ecs import World
from slice_void.game import GameSession, GameStateMachine
from slice_void.leaderboard import LeaderboardStore
from slice_void.physics import Toss
from slice_void.targets import create_target


WIDTH = 800.0
HEIGHT = 600.0


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: float = 100000.0):
        self.ms = start_ms

    def now_ms(self) -> float:
        return self.ms

    def advance(self, ms: float):
        self.ms += ms


def still_toss(x: float, y: float) -> Toss:
    """A toss that hangs in place: no velocity, no gravity, no spin."""
    return Toss(x=x, y=y, vx=0.0, vy=0.0, gravity=0.0, spin_speed=0.0, peak_y=y)


def place(world: World, rng: random.Random, kind, x: float = 400.0,
          y: float = 300.0) -> int:
    return create_target(world, rng, kind, still_toss(x, y))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return LeaderboardStore(tmp_path / 'scores.json')


@pytest.fixture
def session():
    return GameSession(width=WIDTH, height=HEIGHT)


@pytest.fixture
def game(clock, rng, store):
    return GameStateMachine(WIDTH, HEIGHT, clock=clock, rng=rng, store=store)


@pytest.fixture
def playing(game):
    """A game that has just started, with the opening spawn far away."""
    game.start_game()
    return game
