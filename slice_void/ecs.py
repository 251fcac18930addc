"""
Entity-Component-System Core
=============================
Integer entity IDs with per-type component stores.

Stores are insertion-ordered so queries walk entities in creation order,
which keeps hit resolution and spawn checks reproducible.
"""

from typing import Dict, Type, TypeVar, Optional, Iterator, Tuple, Any


C = TypeVar('C')


class World:
    """
    Owns every live entity of one simulation (a game session or the
    menu's idle animation).
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Dict[int, None] = {}
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Dict[int, None] = {}

    def create_entity(self, *components: Any) -> int:
        """Create a new entity, optionally with its initial components."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities[entity_id] = None
        for component in components:
            self.add_component(entity_id, component)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for destruction (processed at end of tick)."""
        if entity_id in self._entities:
            self._dead_entities[entity_id] = None

    def process_dead_entities(self) -> None:
        """Remove all entities marked for destruction."""
        for entity_id in self._dead_entities:
            del self._entities[entity_id]
            for store in self._components.values():
                store.pop(entity_id, None)
        self._dead_entities.clear()

    def add_component(self, entity_id: int, component: Any) -> None:
        self._components.setdefault(type(component), {})[entity_id] = component

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        store = self._components.get(component_type)
        if store is None:
            return None
        return store.get(entity_id)

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        return entity_id in self._components.get(component_type, ())

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Yield (entity_id, component1, component2, ...) for every live
        entity carrying ALL the requested component types.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if not store:
                return
            stores.append(store)

        # Snapshot ids so systems may add entities while iterating
        for entity_id in list(stores[0]):
            if entity_id in self._dead_entities:
                continue
            if not all(entity_id in store for store in stores[1:]):
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def count(self, *component_types: Type) -> int:
        """Count live entities carrying all the given component types."""
        return sum(1 for _ in self.query(*component_types))

    def entity_count(self) -> int:
        """Return the number of active entities."""
        return len(self._entities) - len(self._dead_entities)

    def is_alive(self, entity_id: int) -> bool:
        """Check if an entity is alive (exists and not marked for death)."""
        return entity_id in self._entities and entity_id not in self._dead_entities
