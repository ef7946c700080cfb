"""Graph error types.

These errors are raised when a caller asks the graph for something it does
not hold, or tries to build a snapshot that breaks referential integrity.
The validation engine itself never lets them escape a validation pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import get_close_matches


class GraphError(Exception):
    """Base class for graph errors."""


@dataclass
class EntityNotFoundError(GraphError):
    """Raised when referencing an entity that is not in the graph.

    Attributes:
        entity_id: The ID that was referenced but doesn't exist.
        available: IDs that could have been meant instead.
        context: Description of where the reference occurred.
    """

    entity_id: str
    available: list[str] = field(default_factory=list)
    context: str = ""

    def __post_init__(self) -> None:
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Entity '{self.entity_id}' not found"
        if self.context:
            msg += f" ({self.context})"
        suggestions = self.suggestions()
        if suggestions:
            msg += f"; did you mean {', '.join(repr(s) for s in suggestions)}?"
        return msg

    def suggestions(self) -> list[str]:
        """Find similar IDs that might be typos."""
        return get_close_matches(self.entity_id, self.available, n=3, cutoff=0.6)


@dataclass
class EntityExistsError(GraphError):
    """Raised when creating an entity whose ID is already taken.

    Attributes:
        entity_id: The ID that already exists.
    """

    entity_id: str

    def __post_init__(self) -> None:
        super().__init__(f"Entity '{self.entity_id}' already exists")


@dataclass
class MemberReferenceError(GraphError):
    """Raised when removing an entity that other entities still reference.

    Similar to a foreign key constraint preventing deletion of a
    referenced row.

    Attributes:
        entity_id: The entity that cannot be removed.
        referenced_by: IDs of the ways or relations that still reference it.
    """

    entity_id: str
    referenced_by: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        refs = ", ".join(self.referenced_by[:5])
        if len(self.referenced_by) > 5:
            refs += f", ... and {len(self.referenced_by) - 5} more"
        super().__init__(f"Entity '{self.entity_id}' is still referenced by: {refs}")
