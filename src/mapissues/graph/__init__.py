"""Graph package - entity snapshots, graph, and edit history.

The validation engine only reads from this package: it asks a Graph for
entities and their parents, and asks History for the current ChangeSet.
"""

from mapissues.graph.entity import AnyEntity, Entity, Member, Node, Relation, Way
from mapissues.graph.errors import (
    EntityExistsError,
    EntityNotFoundError,
    GraphError,
    MemberReferenceError,
)
from mapissues.graph.graph import Graph
from mapissues.graph.history import ChangeSet, History, difference
from mapissues.graph.loader import GraphLoadError, graph_from_data, load_graph

__all__ = [
    "AnyEntity",
    "ChangeSet",
    "Entity",
    "EntityExistsError",
    "EntityNotFoundError",
    "Graph",
    "GraphError",
    "GraphLoadError",
    "History",
    "Member",
    "MemberReferenceError",
    "Node",
    "Relation",
    "Way",
    "difference",
    "graph_from_data",
    "load_graph",
]
