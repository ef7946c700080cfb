"""Issue value type.

An Issue is a warning or error attached to one or more entities. Issues are
produced fresh on every validation pass and never mutated.

Two issues are the same issue when their ``id`` matches. The id is derived
from the issue kind and the sorted set of entity IDs involved, never from
object identity or message text, so the same condition reported by two
checks (or reached through two propagation paths) collapses to one entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Iterable

Severity = Literal["warning", "error"]
SEVERITIES: tuple[Severity, ...] = ("warning", "error")


def issue_key(kind: str, entity_ids: Iterable[str]) -> str:
    """Build the identity key for an issue.

    >>> issue_key("crossing_ways", ["w2", "w1"])
    'crossing_ways:w1,w2'
    """
    return f"{kind}:{','.join(sorted(set(entity_ids)))}"


@dataclass(frozen=True)
class Issue:
    """A single validation finding.

    Attributes:
        kind: Machine-readable issue type (e.g. "missing_tag"). Several
            checks may report the same kind.
        severity: "warning" or "error".
        message: Human-readable description.
        entity_ids: IDs of the entities involved, primary entity first.
        hint: Optional suggestion for fixing the issue.
    """

    kind: str
    severity: Severity
    message: str
    entity_ids: tuple[str, ...] = ()
    hint: str = ""

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(f"severity must be one of {SEVERITIES}, got {self.severity!r}")
        if not isinstance(self.entity_ids, tuple):
            object.__setattr__(self, "entity_ids", tuple(self.entity_ids))

    @property
    def id(self) -> str:
        return issue_key(self.kind, self.entity_ids)

    def references(self, entity_id: str) -> bool:
        return entity_id in self.entity_ids


def dedupe_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Drop issues whose id was already seen, keeping the first occurrence."""
    seen: set[str] = set()
    result: list[Issue] = []
    for issue in issues:
        key = issue.id
        if key in seen:
            continue
        seen.add(key)
        result.append(issue)
    return result
