from slice_void.components import Position, Velocity
from slice_void.ecs import World


def test_query_walks_entities_in_creation_order():
    world = World()
    ids = [world.create_entity(Position(i, 0), Velocity()) for i in range(5)]
    world.create_entity(Position(99, 0))  # No velocity

    assert [eid for eid, _, _ in world.query(Position, Velocity)] == ids


def test_destroyed_entities_vanish_from_queries_before_cleanup():
    world = World()
    a = world.create_entity(Position())
    b = world.create_entity(Position())

    world.destroy_entity(a)
    assert [eid for eid, _ in world.query(Position)] == [b]
    assert world.entity_count() == 1
    assert not world.is_alive(a)

    world.process_dead_entities()
    assert world.get_component(a, Position) is None


def test_entities_created_during_a_query_are_not_visited():
    world = World()
    world.create_entity(Position())
    seen = []
    for eid, _ in world.query(Position):
        seen.append(eid)
        world.create_entity(Position())
    assert seen == [0]
    assert world.count(Position) == 2


def test_destroying_an_unknown_entity_is_harmless():
    world = World()
    world.destroy_entity(42)
    world.process_dead_entities()
    assert world.entity_count() == 0
