from slice_void.components import (
    EntityKind, Position, Velocity, SliceTarget, Renderable, ParticleTag
)
from slice_void.effects import apply_damage, resolve_hit, cull_system
from slice_void.settings import BOMB_GRAY, NEON_RED, ICE_BLUE, WHITE

from conftest import HEIGHT, place


def particle_colors(world):
    return [rend.color for _, _, rend in world.query(ParticleTag, Renderable)]


def drop(session, rng, kind):
    """Put a target below the exit line, falling."""
    eid = place(session.world, rng, kind, 400, HEIGHT + 81)
    session.world.get_component(eid, Velocity).y = 1.0
    return eid


def test_fruit_scores_and_bursts_in_its_own_color(session, rng):
    eid = place(session.world, rng, EntityKind.FRUIT)
    color = session.world.get_component(eid, Renderable).color

    events = resolve_hit(session, eid, rng, 0.0)

    assert session.score == 10
    assert events[0]['type'] == 'fruit_sliced'
    assert particle_colors(session.world) == [color] * 10
    assert not session.world.is_alive(eid)


def test_bomb_costs_a_life_and_bursts_gray_and_red(session, rng):
    eid = place(session.world, rng, EntityKind.BOMB)

    events = resolve_hit(session, eid, rng, 0.0)

    assert session.lives == 2
    assert session.score == 0
    assert [e['type'] for e in events] == ['bomb_hit', 'life_lost']
    colors = particle_colors(session.world)
    assert len(colors) == 20
    assert colors.count(BOMB_GRAY) == 10
    assert colors.count(NEON_RED) == 10


def test_ice_freezes_and_bursts_thirty_particles(session, rng):
    eid = place(session.world, rng, EntityKind.ICE)

    events = resolve_hit(session, eid, rng, 1000.0)

    assert events == [{'type': 'ice_hit', 'x': 400.0, 'y': 300.0,
                       'duration_ms': 3000}]
    assert session.freeze.end_ms == 4000.0
    colors = particle_colors(session.world)
    assert colors.count(ICE_BLUE) == 15
    assert colors.count(WHITE) == 15
    assert session.score == 0
    assert session.lives == 3


def test_damage_never_goes_below_zero(session):
    session.lives = 1
    assert apply_damage(session, 'bomb')[0]['lives'] == 0
    assert apply_damage(session, 'bomb') == []
    assert session.lives == 0


def test_every_third_dropped_fruit_costs_a_life(session, rng):
    lives = []
    for _ in range(6):
        drop(session, rng, EntityKind.FRUIT)
        cull_system(session)
        session.world.process_dead_entities()
        lives.append(session.lives)

    assert lives == [3, 3, 2, 2, 2, 1]
    assert session.dropped_fruit == 0


def test_dropped_bombs_and_ice_are_free(session, rng):
    drop(session, rng, EntityKind.BOMB)
    drop(session, rng, EntityKind.ICE)
    drop(session, rng, EntityKind.BOMB)

    assert cull_system(session) == []
    session.world.process_dead_entities()
    assert session.dropped_fruit == 0
    assert session.lives == 3
    assert session.world.entity_count() == 0


def test_rising_target_below_the_line_is_kept(session, rng):
    eid = place(session.world, rng, EntityKind.FRUIT, 400, HEIGHT + 81)
    session.world.get_component(eid, Velocity).y = -12.0

    assert cull_system(session) == []
    assert session.world.is_alive(eid)


def test_sliced_fruit_never_counts_as_dropped(session, rng):
    eid = drop(session, rng, EntityKind.FRUIT)
    session.world.get_component(eid, SliceTarget).sliced = True

    assert cull_system(session) == []
    assert session.dropped_fruit == 0
    assert not session.world.is_alive(eid)


def test_slicing_does_not_reset_the_drop_count(session, rng):
    drop(session, rng, EntityKind.FRUIT)
    drop(session, rng, EntityKind.FRUIT)
    cull_system(session)
    session.world.process_dead_entities()

    eid = place(session.world, rng, EntityKind.FRUIT)
    resolve_hit(session, eid, rng, 0.0)
    assert session.dropped_fruit == 2

    drop(session, rng, EntityKind.FRUIT)
    events = cull_system(session)
    assert events[-1] == {'type': 'life_lost', 'cause': 'drop', 'lives': 2}


def test_resolve_hit_on_missing_entity_is_a_no_op(session, rng):
    assert resolve_hit(session, 999, rng, 0.0) == []
    assert session.world.get_component(999, Position) is None
