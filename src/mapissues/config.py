"""Validation configuration loading.

Configuration is read from a YAML file (``mapissues.yaml`` by convention)::

    many_deletions_threshold: 50
    almost_junction_distance: 3.5
    generic_names: [building, shop, road]
    deprecated_tags:
      "landuse=meadow_orchard": {landuse: orchard}
    disabled_checks: [generic_name]

Every field is optional; missing fields fall back to the built-in defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from ruamel.yaml import YAML

from mapissues.observability.logging import get_logger

log = get_logger(__name__)

DEFAULT_CONFIG_FILENAME = "mapissues.yaml"
DEFAULT_MANY_DELETIONS_THRESHOLD = 100
DEFAULT_ALMOST_JUNCTION_DISTANCE = 5.0
MANY_DELETIONS_ENV = "MAPISSUES_MANY_DELETIONS"

DEFAULT_GENERIC_NAMES = [
    "building",
    "cafe",
    "church",
    "house",
    "name",
    "no name",
    "noname",
    "park",
    "parking",
    "path",
    "restaurant",
    "road",
    "school",
    "shop",
    "store",
    "street",
    "unnamed",
]

# "key=value" -> replacement tags. The old key is dropped unless the
# replacement sets it again.
DEFAULT_DEPRECATED_TAGS: dict[str, dict[str, str]] = {
    "amenity=firepit": {"leisure": "firepit"},
    "amenity=public_building": {"building": "public"},
    "barrier=wire_fence": {"barrier": "fence", "fence_type": "chain"},
    "barrier=wood_fence": {"barrier": "fence", "fence_type": "wood"},
    "highway=ford": {"ford": "yes"},
    "landuse=farm": {"landuse": "farmland"},
    "landuse=field": {"landuse": "farmland"},
    "leisure=beach": {"natural": "beach"},
    "natural=marsh": {"natural": "wetland", "wetland": "marsh"},
    "shop=organic": {"shop": "supermarket", "organic": "only"},
}


class ConfigError(Exception):
    """Raised when validation configuration cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config at {path}: {reason}")


@dataclass
class ValidationConfig:
    """Settings consumed by the check catalogue and the issue manager.

    Attributes:
        many_deletions_threshold: Deleting more entities than this in one
            session raises a warning. Overridden by MAPISSUES_MANY_DELETIONS.
        almost_junction_distance: Metres within which a loose highway end
            counts as almost joining another highway.
        generic_names: Lower-case names considered placeholders.
        deprecated_tags: "key=value" -> replacement tags.
        enabled_checks: If set, only these checks run.
        disabled_checks: Checks that never run.
    """

    many_deletions_threshold: int = DEFAULT_MANY_DELETIONS_THRESHOLD
    almost_junction_distance: float = DEFAULT_ALMOST_JUNCTION_DISTANCE
    generic_names: list[str] = field(default_factory=lambda: list(DEFAULT_GENERIC_NAMES))
    deprecated_tags: dict[str, dict[str, str]] = field(
        default_factory=lambda: dict(DEFAULT_DEPRECATED_TAGS)
    )
    enabled_checks: list[str] | None = None
    disabled_checks: list[str] = field(default_factory=list)

    def get_many_deletions_threshold(self) -> int:
        """Threshold after applying the environment override."""
        raw = os.getenv(MANY_DELETIONS_ENV)
        if raw:
            try:
                return int(raw)
            except ValueError:
                log.warning("invalid_env_override", variable=MANY_DELETIONS_ENV, value=raw)
        return self.many_deletions_threshold

    def is_generic_name(self, name: str) -> bool:
        return name.strip().lower() in {n.lower() for n in self.generic_names}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationConfig:
        """Create config from dictionary.

        Args:
            data: Dictionary containing any subset of the config fields.
                ``deprecated_tags`` entries are merged over the defaults.

        Returns:
            ValidationConfig instance.

        Raises:
            ValueError: If a field has the wrong shape.
        """
        threshold = int(data.get("many_deletions_threshold", DEFAULT_MANY_DELETIONS_THRESHOLD))
        if threshold < 0:
            raise ValueError(f"many_deletions_threshold must be >= 0, got {threshold}")

        distance = float(data.get("almost_junction_distance", DEFAULT_ALMOST_JUNCTION_DISTANCE))
        if distance < 0:
            raise ValueError(f"almost_junction_distance must be >= 0, got {distance}")

        generic_names = [str(n) for n in data.get("generic_names", DEFAULT_GENERIC_NAMES)]

        deprecated = dict(DEFAULT_DEPRECATED_TAGS)
        for old, replacement in dict(data.get("deprecated_tags") or {}).items():
            if "=" not in str(old):
                raise ValueError(f"deprecated_tags keys must be 'key=value', got {old!r}")
            deprecated[str(old)] = {str(k): str(v) for k, v in dict(replacement).items()}

        enabled = data.get("enabled_checks")
        return cls(
            many_deletions_threshold=threshold,
            almost_junction_distance=distance,
            generic_names=generic_names,
            deprecated_tags=deprecated,
            enabled_checks=[str(c) for c in enabled] if enabled is not None else None,
            disabled_checks=[str(c) for c in data.get("disabled_checks", [])],
        )


def load_config(path: Path | None = None) -> ValidationConfig:
    """Load validation configuration.

    Args:
        path: YAML config file. None returns the defaults.

    Returns:
        ValidationConfig instance.

    Raises:
        ConfigError: If the file is missing or cannot be parsed.
    """
    if path is None:
        return ValidationConfig()

    if not path.exists():
        raise ConfigError(path, "File not found")

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)

        if data is None:
            return ValidationConfig()
        if not isinstance(data, dict):
            raise ConfigError(path, "Top level must be a mapping")

        config = ValidationConfig.from_dict(dict(data))
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(path, str(e)) from e

    log.debug("config_loaded", path=str(path))
    return config
