"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """World position in virtual pixels."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in pixels per tick."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Gravity:
    """Downward acceleration added to velocity each tick."""
    strength: float = 0.25


@dataclass
class Spin:
    """Rotation angle (radians) and its per-tick increment."""
    angle: float = 0.0
    speed: float = 0.0


@dataclass
class Drag:
    """Velocity multiplier applied each tick."""
    value: float = 0.96


# =============================================================================
# SLICE TARGETS
# =============================================================================

class EntityKind(Enum):
    """Discriminant for everything that can be tossed."""
    FRUIT = 'fruit'
    BOMB = 'bomb'
    ICE = 'ice'


@dataclass
class SliceTarget:
    """
    Marks a tossed entity. `sliced` only ever flips False -> True;
    sliced targets are skipped by collision and culled the same tick.
    """
    kind: EntityKind = EntityKind.FRUIT
    radius: float = 40.0
    sliced: bool = False


@dataclass
class Renderable:
    """Visual data handed to the presentation layer."""
    glyph: str = '?'
    color: int = 7  # ANSI 256 color
    variant: str = ''


# =============================================================================
# PARTICLES
# =============================================================================

class ParticleShape(Enum):
    CIRCLE = 'circle'
    STAR = 'star'


@dataclass
class Fade:
    """Remaining life in [0, 1], reduced by `decay` each tick."""
    life: float = 1.0
    decay: float = 0.02


@dataclass
class ParticleTag:
    """Marks decorative feedback entities. They never collide."""
    shape: ParticleShape = ParticleShape.CIRCLE
    size: float = 6.0


@dataclass
class IdleTag:
    """Decorative menu entity."""
    pass
