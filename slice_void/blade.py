"""
Blade Trail & Collision
========================
The blade is a short, decaying run of recent pointer samples. Only its
newest segment cuts: every tick, each live unsliced target whose center
lies closer to that segment than its radius is hit.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .ecs import World
from .components import Position, SliceTarget
from .settings import BLADE_MAX_POINTS, BLADE_DECAY


@dataclass
class BladePoint:
    x: float
    y: float
    life: float = 1.0


class BladeTrail:
    """
    Chronological, capacity-bounded buffer of blade points (newest last).
    Overflow drops the oldest point.
    """

    def __init__(self, capacity: int = BLADE_MAX_POINTS, decay: float = BLADE_DECAY):
        self.capacity = capacity
        self.decay_rate = decay
        self.points: List[BladePoint] = []

    def __len__(self) -> int:
        return len(self.points)

    def append(self, x: float, y: float) -> None:
        self.points.append(BladePoint(x, y))
        if len(self.points) > self.capacity:
            del self.points[0]

    def decay(self) -> None:
        """Age every point by one tick and prune the expired ones."""
        for point in self.points:
            point.life -= self.decay_rate
        self.points = [p for p in self.points if p.life > 0]

    def clear(self) -> None:
        self.points = []

    def newest_segment(self) -> Optional[Tuple[BladePoint, BladePoint]]:
        """(previous, tip) or None when fewer than two points survive."""
        if len(self.points) < 2:
            return None
        return self.points[-2], self.points[-1]


def point_segment_distance(px: float, py: float,
                           ax: float, ay: float,
                           bx: float, by: float) -> float:
    """Shortest distance from (px, py) to the segment a-b."""
    dx = bx - ax
    dy = by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)

    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def collision_system(world: World, blade: BladeTrail) -> List[int]:
    """
    Test the blade's newest segment against every unsliced target.

    Every target within reach is marked sliced (no first-hit-wins) and
    returned in creation order.
    """
    segment = blade.newest_segment()
    if segment is None:
        return []
    prev, tip = segment

    hits = []
    for entity_id, pos, target in world.query(Position, SliceTarget):
        if target.sliced:
            continue
        distance = point_segment_distance(pos.x, pos.y, prev.x, prev.y, tip.x, tip.y)
        if distance < target.radius:
            target.sliced = True
            hits.append(entity_id)
    return hits
