"""Immutable entity graph.

A Graph is a point-in-time snapshot of every entity in the editing session.
Edits never mutate a graph: ``replace()`` and ``remove()`` return a new
snapshot, so history can keep every state around for undo/redo and the
validator can read a snapshot without worrying about concurrent edits.

Relationship queries (parent ways of a node, parent relations of any
entity) are answered from reverse indices built lazily on first use and
cached for the lifetime of the snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.entity import AnyEntity, Node, Relation, Way
from mapissues.graph.errors import EntityExistsError, EntityNotFoundError, MemberReferenceError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping


class Graph:
    """Point-in-time snapshot of all entities.

    Attributes:
        _entities: Entity ID -> entity snapshot, in insertion order.
    """

    def __init__(self, entities: Mapping[str, AnyEntity] | None = None) -> None:
        self._entities: dict[str, AnyEntity] = dict(entities or {})
        self._parent_ways: dict[str, list[str]] | None = None
        self._parent_relations: dict[str, list[str]] | None = None

    @classmethod
    def empty(cls) -> Graph:
        return cls()

    @classmethod
    def from_entities(cls, entities: Iterable[AnyEntity]) -> Graph:
        """Build a graph from entity snapshots.

        Raises:
            EntityExistsError: If two entities share an ID.
        """
        data: dict[str, AnyEntity] = {}
        for entity in entities:
            if entity.id in data:
                raise EntityExistsError(entity.id)
            data[entity.id] = entity
        return cls(data)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def has_entity(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def get_entity(self, entity_id: str) -> AnyEntity | None:
        """Get an entity by ID, or None if absent."""
        return self._entities.get(entity_id)

    def entity(self, entity_id: str) -> AnyEntity:
        """Get an entity by ID.

        Raises:
            EntityNotFoundError: If the entity is not in this snapshot.
        """
        try:
            return self._entities[entity_id]
        except KeyError:
            raise EntityNotFoundError(
                entity_id,
                available=list(self._entities),
                context="graph lookup",
            ) from None

    def entity_ids(self) -> list[str]:
        return list(self._entities)

    def entities(self) -> list[AnyEntity]:
        return list(self._entities.values())

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[AnyEntity]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------

    def _build_indices(self) -> None:
        parent_ways: dict[str, list[str]] = {}
        parent_relations: dict[str, list[str]] = {}
        for entity in self._entities.values():
            if isinstance(entity, Way):
                for node_id in dict.fromkeys(entity.nodes):
                    parent_ways.setdefault(node_id, []).append(entity.id)
            elif isinstance(entity, Relation):
                for member_id in dict.fromkeys(m.id for m in entity.members):
                    parent_relations.setdefault(member_id, []).append(entity.id)
        self._parent_ways = parent_ways
        self._parent_relations = parent_relations

    @staticmethod
    def _id_of(entity: AnyEntity | str) -> str:
        return entity if isinstance(entity, str) else entity.id

    def parent_ways(self, entity: AnyEntity | str) -> list[Way]:
        """Return the ways that contain this node as a member."""
        if self._parent_ways is None:
            self._build_indices()
        assert self._parent_ways is not None
        ids = self._parent_ways.get(self._id_of(entity), [])
        return [way for wid in ids if isinstance(way := self._entities.get(wid), Way)]

    def parent_relations(self, entity: AnyEntity | str) -> list[Relation]:
        """Return the relations that list this entity as a member."""
        if self._parent_relations is None:
            self._build_indices()
        assert self._parent_relations is not None
        ids = self._parent_relations.get(self._id_of(entity), [])
        return [rel for rid in ids if isinstance(rel := self._entities.get(rid), Relation)]

    def child_nodes(self, way: Way) -> list[Node]:
        """Return the node snapshots of a way, skipping IDs not in the graph."""
        nodes: list[Node] = []
        for node_id in way.nodes:
            node = self._entities.get(node_id)
            if isinstance(node, Node):
                nodes.append(node)
        return nodes

    # -------------------------------------------------------------------------
    # Editing (copy-on-write)
    # -------------------------------------------------------------------------

    def replace(self, entity: AnyEntity) -> Graph:
        """Return a new snapshot with this entity created or replaced."""
        if self._entities.get(entity.id) is entity:
            return self
        data = dict(self._entities)
        data[entity.id] = entity
        return Graph(data)

    def create(self, entity: AnyEntity) -> Graph:
        """Return a new snapshot with this entity added.

        Raises:
            EntityExistsError: If the ID is already in use.
        """
        if entity.id in self._entities:
            raise EntityExistsError(entity.id)
        return self.replace(entity)

    def remove(self, entity: AnyEntity | str, *, cascade: bool = False) -> Graph:
        """Return a new snapshot without this entity.

        Args:
            entity: Entity or ID to remove.
            cascade: If True, also drop references to it from parent ways
                and relations. Ways left with fewer than two nodes are kept;
                validation will flag them.

        Raises:
            EntityNotFoundError: If the entity is not in this snapshot.
            MemberReferenceError: If still referenced and cascade=False.
        """
        entity_id = self._id_of(entity)
        if entity_id not in self._entities:
            raise EntityNotFoundError(entity_id, available=list(self._entities), context="remove")

        parents: list[Way | Relation] = [
            *self.parent_ways(entity_id),
            *self.parent_relations(entity_id),
        ]
        if parents and not cascade:
            raise MemberReferenceError(entity_id, referenced_by=[p.id for p in parents])

        data = dict(self._entities)
        del data[entity_id]
        for parent in parents:
            if isinstance(parent, Way):
                data[parent.id] = parent.update(
                    nodes=tuple(n for n in parent.nodes if n != entity_id)
                )
            else:
                data[parent.id] = parent.update(
                    members=tuple(m for m in parent.members if m.id != entity_id)
                )
        return Graph(data)

    def __repr__(self) -> str:
        counts = {"node": 0, "way": 0, "relation": 0}
        for entity in self._entities.values():
            counts[entity.type] += 1
        return (
            f"Graph(nodes={counts['node']}, ways={counts['way']}, relations={counts['relation']})"
        )
