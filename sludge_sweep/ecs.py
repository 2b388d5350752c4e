"""
Entity-Component-System Core
=============================
Integer entity IDs with one component dictionary per component type.
Queries walk entities in creation order so merge scans and sweep hits
resolve the same way for the same random seed.
"""

from typing import Dict, Set, Type, TypeVar, Optional, Iterator, Tuple, Any


C = TypeVar('C')


class World:
    """
    Owns every live entity of one game session.

    Destruction is deferred: destroyed entities disappear from queries
    immediately but keep their components until process_dead_entities().
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Set[int] = set()
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Set[int] = set()

    def create_entity(self, *components: Any) -> int:
        """Create a new entity, optionally attaching components."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities.add(entity_id)
        for component in components:
            self.add_component(entity_id, component)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for destruction (processed at end of tick)."""
        if entity_id in self._entities:
            self._dead_entities.add(entity_id)

    def process_dead_entities(self) -> None:
        """Remove all entities marked for destruction."""
        for entity_id in self._dead_entities:
            self._entities.discard(entity_id)
            for component_store in self._components.values():
                component_store.pop(entity_id, None)
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
        store = self._components.get(component_type)
        return store is not None and entity_id in store

    def query(self, *component_types: Type) -> Iterator[Tuple[int, ...]]:
        """
        Query for all live entities that have ALL specified component types.

        Yields tuples of (entity_id, component1, component2, ...) in
        creation order. The candidate list is fixed when iteration starts,
        so entities created during iteration are not visited, and entities
        destroyed during iteration are skipped.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if not store:
                return
            stores.append(store)

        smallest = min(stores, key=len)
        candidates = sorted(
            eid for eid in smallest
            if all(eid in store for store in stores)
        )

        for entity_id in candidates:
            if entity_id in self._dead_entities:
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def get_entities_with(self, *component_types: Type) -> Iterator[int]:
        """Get all live entity IDs that have all specified components."""
        for result in self.query(*component_types):
            yield result[0]

    def count(self, *component_types: Type) -> int:
        """Number of live entities carrying all the given components."""
        return sum(1 for _ in self.query(*component_types))

    def entity_count(self) -> int:
        """Return the number of active entities."""
        return len(self._entities) - len(self._dead_entities)

    def is_alive(self, entity_id: int) -> bool:
        """Check if an entity is alive (exists and not marked for death)."""
        return entity_id in self._entities and entity_id not in self._dead_entities
