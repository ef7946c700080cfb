"""mapissues - incremental issue validation for map entity graphs."""

__version__ = "0.3.0"
