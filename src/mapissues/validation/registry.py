"""Check registry.

Checks are plain functions registered with metadata at import time. There
are two kinds:

- entity checks: ``check(entity, context) -> list[Issue]``, run once per
  affected entity and cached per entity ID.
- global checks: ``check(changes, context) -> list[Issue]``, run once per
  validation pass over the whole change set.

Usage::

    registry = CheckRegistry()

    @registry.entity_check("missing_tag")
    def check_missing_tag(entity, context):
        ...

Checks must be total: given an entity type they do not handle they return
an empty list rather than raising. Registration order is the run order,
which only affects the order of the merged issue list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from mapissues.config import ValidationConfig
    from mapissues.graph.entity import AnyEntity
    from mapissues.graph.graph import Graph
    from mapissues.graph.history import ChangeSet
    from mapissues.validation.issue import Issue

    EntityCheck = Callable[[AnyEntity, CheckContext], list[Issue]]
    GlobalCheck = Callable[[ChangeSet, CheckContext], list[Issue]]

CheckScope = Literal["entity", "global"]

CHECK_META_ATTR = "_check_meta"


@dataclass(frozen=True)
class CheckMeta:
    """Metadata attached to a registered check function."""

    name: str
    scope: CheckScope
    priority: int
    description: str = ""


@dataclass(frozen=True)
class CheckContext:
    """Read-only inputs shared by every check in a pass.

    Attributes:
        graph: The snapshot being validated.
        config: Validation settings (thresholds, tag tables).
        enabled_checks: Names of the checks running in this pass. None
            when a check is called on its own, outside a registry.
    """

    graph: Graph
    config: ValidationConfig
    enabled_checks: frozenset[str] | None = None

    def is_enabled(self, name: str) -> bool:
        return self.enabled_checks is None or name in self.enabled_checks


class CheckRegistry:
    """Ordered collection of entity and global checks."""

    def __init__(self) -> None:
        self._checks: dict[str, CheckMeta] = {}
        self._functions: dict[str, Callable[..., Any]] = {}

    # -- Registration ----------------------------------------------------------

    def register(self, fn: Callable[..., Any], meta: CheckMeta) -> None:
        """Register a check function with its metadata.

        Raises:
            ValueError: If a check with the same name is already registered.
        """
        if meta.name in self._checks:
            msg = (
                f"Duplicate check name {meta.name!r}: "
                f"already registered by {self._functions[meta.name].__qualname__}"
            )
            raise ValueError(msg)
        self._checks[meta.name] = meta
        self._functions[meta.name] = fn

    def _decorator(
        self, name: str, scope: CheckScope, description: str
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            summary = next(iter((fn.__doc__ or "").strip().splitlines()), "")
            meta = CheckMeta(
                name=name,
                scope=scope,
                priority=len(self._checks),
                description=description or summary,
            )
            self.register(fn, meta)
            setattr(fn, CHECK_META_ATTR, meta)
            return fn

        return decorator

    def entity_check(
        self, name: str, *, description: str = ""
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a per-entity check."""
        return self._decorator(name, "entity", description)

    def global_check(
        self, name: str, *, description: str = ""
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a once-per-pass change set check."""
        return self._decorator(name, "global", description)

    # -- Lookup ----------------------------------------------------------------

    def _ordered(self, scope: CheckScope) -> list[tuple[CheckMeta, Callable[..., Any]]]:
        metas = sorted(
            (m for m in self._checks.values() if m.scope == scope), key=lambda m: m.priority
        )
        return [(m, self._functions[m.name]) for m in metas]

    def entity_checks(self) -> list[tuple[CheckMeta, EntityCheck]]:
        return self._ordered("entity")

    def global_checks(self) -> list[tuple[CheckMeta, GlobalCheck]]:
        return self._ordered("global")

    def get_meta(self, name: str) -> CheckMeta | None:
        return self._checks.get(name)

    @property
    def check_names(self) -> list[str]:
        """All registered check names (registration order)."""
        return list(self._checks.keys())

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks

    # -- Running ---------------------------------------------------------------

    def run_entity_checks(self, entity: AnyEntity, context: CheckContext) -> list[Issue]:
        """Run every entity check against one entity, concatenating results."""
        issues: list[Issue] = []
        for _meta, fn in self.entity_checks():
            issues.extend(fn(entity, context))
        return issues

    def run_global_checks(self, changes: ChangeSet, context: CheckContext) -> list[Issue]:
        """Run every global check against the change set."""
        issues: list[Issue] = []
        for _meta, fn in self.global_checks():
            issues.extend(fn(changes, context))
        return issues

    # -- Derivation ------------------------------------------------------------

    def select(
        self,
        enabled: Iterable[str] | None = None,
        disabled: Iterable[str] = (),
    ) -> CheckRegistry:
        """Return a new registry restricted to a subset of checks.

        Args:
            enabled: If given, only these checks are kept.
            disabled: Checks to drop.

        Raises:
            ValueError: If a name is not registered.
        """
        enabled_set = set(enabled) if enabled is not None else None
        disabled_set = set(disabled)
        unknown = ((enabled_set or set()) | disabled_set) - set(self._checks)
        if unknown:
            raise ValueError(f"Unknown check(s): {', '.join(sorted(unknown))}")

        selected = CheckRegistry()
        for name, meta in self._checks.items():
            if enabled_set is not None and name not in enabled_set:
                continue
            if name in disabled_set:
                continue
            selected.register(self._functions[name], meta)
        return selected

    def check_table(self) -> str:
        """Markdown table of registered checks."""
        lines = ["| Priority | Name | Scope | Description |"]
        lines.append("|----------|------|-------|-------------|")
        for meta in sorted(self._checks.values(), key=lambda m: m.priority):
            lines.append(
                f"| {meta.priority} | {meta.name} | {meta.scope} | {meta.description or '-'} |"
            )
        return "\n".join(lines)
