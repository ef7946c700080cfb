"""User preference storage.

Preferences are small key/value settings that survive between sessions,
such as which features the issue list is shown for. The PreferenceStore
protocol is all the rest of the package depends on; YamlPreferenceStore
persists to ``~/.config/mapissues/preferences.yaml`` and
MemoryPreferenceStore is used for tests and throwaway sessions.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from mapissues.observability.logging import get_logger

log = get_logger(__name__)

CONFIG_DIR_ENV = "MAPISSUES_CONFIG_DIR"
_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "mapissues"


def default_preferences_path() -> Path:
    """Preference file location, honouring MAPISSUES_CONFIG_DIR."""
    config_dir = os.getenv(CONFIG_DIR_ENV)
    base = Path(config_dir) if config_dir else _DEFAULT_CONFIG_DIR
    return base / "preferences.yaml"


@runtime_checkable
class PreferenceStore(Protocol):
    """Key/value preference backend."""

    def get(self, key: str) -> Any:
        """Return the stored value, or None if unset."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a value. Setting None removes the key."""
        ...


class MemoryPreferenceStore:
    """In-process preference store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = value


class YamlPreferenceStore:
    """Preference store persisted to a YAML file.

    The file is read on first access and rewritten on every ``set()``.
    An unreadable file is logged and treated as empty; it is replaced on
    the next write.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_preferences_path()
        self._values: dict[str, Any] | None = None
        self._yaml = YAML()
        self._yaml.default_flow_style = False

    def _load(self) -> dict[str, Any]:
        if self._values is not None:
            return self._values
        self._values = {}
        if not self.path.exists():
            return self._values
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = self._yaml.load(f)
        except OSError as e:
            log.warning("preferences_load_failed", path=str(self.path), error=str(e))
            return self._values
        except YAMLError as e:
            log.warning("preferences_parse_failed", path=str(self.path), error=str(e))
            return self._values
        if isinstance(data, dict):
            self._values = dict(data)
        elif data is not None:
            log.warning("preferences_not_a_mapping", path=str(self.path))
        return self._values

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        values = self._load()
        if value is None:
            values.pop(key, None)
        else:
            values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            self._yaml.dump(values, f)
        log.debug("preference_saved", key=key, path=str(self.path))
