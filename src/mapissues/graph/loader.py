"""Load entity graphs from JSON files.

Accepted shapes::

    {"entities": [{"type": "node", "id": "n1", "loc": [0, 0]}, ...]}
    [{"type": "way", "id": "w1", "nodes": ["n1", "n2"], "tags": {...}}, ...]
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from mapissues.graph.entity import Entity
from mapissues.graph.errors import EntityExistsError, GraphError
from mapissues.graph.graph import Graph

if TYPE_CHECKING:
    from pathlib import Path

_ENTITY_LIST = TypeAdapter(list[Entity])


class GraphLoadError(GraphError):
    """Raised when an entity file cannot be read or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load entities from {path}: {reason}")


def graph_from_data(data: Any) -> Graph:
    """Build a graph from decoded JSON data.

    Raises:
        ValueError: If a JSON object has no "entities" list.
        ValidationError: If an entity does not match its schema.
        EntityExistsError: If two entities share an ID.
    """
    if isinstance(data, dict):
        data = data.get("entities")
        if not isinstance(data, list):
            raise ValueError("missing 'entities' list")
    return Graph.from_entities(_ENTITY_LIST.validate_python(data))


def load_graph(path: Path) -> Graph:
    """Load a graph from a JSON entity file.

    Raises:
        GraphLoadError: If the file is missing, malformed, or invalid.
    """
    if not path.exists():
        raise GraphLoadError(path, "File not found")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return graph_from_data(data)
    except json.JSONDecodeError as e:
        raise GraphLoadError(path, f"Invalid JSON: {e}") from e
    except ValidationError as e:
        raise GraphLoadError(path, f"{e.error_count()} invalid entities") from e
    except ValueError as e:
        raise GraphLoadError(path, str(e)) from e
    except EntityExistsError as e:
        raise GraphLoadError(path, str(e)) from e
