"""Entity value models.

Entities are immutable snapshots. An edit never mutates an entity; it
produces a new snapshot under the same ID via ``update()``, and the new
snapshot replaces the old one in a new Graph.

Entity types:
- Node: a point with an optional location
- Way: an ordered sequence of node IDs (a line, or an area when closed)
- Relation: a typed, role-annotated member list grouping other entities
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

EntityType = Literal["node", "way", "relation"]

# Keys that carry no meaning about what a feature is.
UNINTERESTING_KEYS = frozenset(
    {
        "attribution",
        "created_by",
        "source",
        "odbl",
        "note",
        "fixme",
    }
)
UNINTERESTING_PREFIXES = ("source:", "tiger:", "note:")


def is_interesting_key(key: str) -> bool:
    """True if a tag key says something about what a feature is."""
    return key not in UNINTERESTING_KEYS and not key.startswith(UNINTERESTING_PREFIXES)


class _EntityBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    tags: dict[str, str] = Field(default_factory=dict)

    def update(self, **changes: Any) -> Any:
        """Return a new snapshot with the given fields replaced."""
        return self.model_copy(update=changes)

    def has_interesting_tags(self) -> bool:
        """True if any tag describes what the feature is."""
        return any(is_interesting_key(key) for key in self.tags)


class Node(_EntityBase):
    """A point entity."""

    type: Literal["node"] = "node"
    loc: tuple[float, float] | None = None


class Way(_EntityBase):
    """An ordered list of nodes."""

    type: Literal["way"] = "way"
    nodes: tuple[str, ...] = ()

    @property
    def is_closed(self) -> bool:
        """True if the way starts and ends at the same node."""
        return len(self.nodes) > 1 and self.nodes[0] == self.nodes[-1]

    def contains(self, node_id: str) -> bool:
        return node_id in self.nodes


class Member(BaseModel):
    """A reference from a relation to one of its members."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    type: EntityType
    role: str = ""


class Relation(_EntityBase):
    """A grouping of other entities with roles."""

    type: Literal["relation"] = "relation"
    members: tuple[Member, ...] = ()

    @property
    def is_multipolygon(self) -> bool:
        return self.tags.get("type") == "multipolygon"

    def has_member(self, entity_id: str) -> bool:
        return any(m.id == entity_id for m in self.members)

    def members_by_role(self, role: str) -> list[Member]:
        return [m for m in self.members if m.role == role]


AnyEntity = Node | Way | Relation
Entity = Annotated[AnyEntity, Field(discriminator="type")]
