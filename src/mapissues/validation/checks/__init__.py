"""Built-in check catalogue.

Importing this package registers every built-in check. Entity checks run in
this order: almost_junction, crossing_ways, deprecated_tag, disconnected_way,
generic_name, missing_tag, old_multipolygon, tag_suggests_area. The global
many_deletions check runs once per pass.
"""

from mapissues.validation.checks import (  # noqa: F401 - imported for registration
    almost_junction,
    crossing_ways,
    deprecated_tag,
    disconnected_way,
    generic_name,
    many_deletions,
    missing_tag,
    old_multipolygon,
    tag_suggests_area,
)
from mapissues.validation.checks.base import get_registry
from mapissues.validation.registry import CheckRegistry


def default_registry() -> CheckRegistry:
    """Return the registry holding every built-in check."""
    return get_registry()


__all__ = ["default_registry"]
