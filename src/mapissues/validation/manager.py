"""Issue manager: runs incremental validation passes.

A pass (``validate()``):

1. clears the per-entity cache;
2. runs the global checks once against the session's change set;
3. expands the change set to every entity whose issues may have changed
   (see ``propagation.expand``);
4. collects each affected entity's issues through the cache;
5. deduplicates by issue id, keeping the first occurrence;
6. publishes the final list on the ``reload`` channel.

A pass always completes. An entity that disappears from the graph while it
is being checked contributes no issues; it never aborts the pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from mapissues.config import ValidationConfig
from mapissues.events import Channel
from mapissues.graph.errors import EntityNotFoundError
from mapissues.observability.logging import get_logger
from mapissues.preferences import MemoryPreferenceStore
from mapissues.validation.cache import EntityIssueCache
from mapissues.validation.issue import Issue, dedupe_issues
from mapissues.validation.propagation import expand
from mapissues.validation.registry import CheckContext

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mapissues.graph.history import History
    from mapissues.preferences import PreferenceStore
    from mapissues.validation.registry import CheckRegistry

log = get_logger(__name__)

FeatureApplicability = Literal["edited", "all"]

FEATURE_APPLICABILITY_KEY = "issue-features"
FEATURE_APPLICABILITY_OPTIONS: tuple[FeatureApplicability, ...] = ("edited", "all")
DEFAULT_FEATURE_APPLICABILITY: FeatureApplicability = "edited"


class IssueManager:
    """Validates the edit session and serves the resulting issues.

    Args:
        history: Source of the current graph and change set.
        registry: Checks to run. Defaults to the built-in catalogue,
            filtered by ``config.enabled_checks``/``config.disabled_checks``.
        preferences: Where the feature-applicability setting is persisted.
        config: Validation settings passed to every check.

    Attributes:
        reload: Channel published with the issue list after every pass.
    """

    feature_applicability_options = FEATURE_APPLICABILITY_OPTIONS

    def __init__(
        self,
        history: History,
        *,
        registry: CheckRegistry | None = None,
        preferences: PreferenceStore | None = None,
        config: ValidationConfig | None = None,
    ) -> None:
        self._history = history
        self._config = config or ValidationConfig()
        if registry is None:
            from mapissues.validation.checks import default_registry

            registry = default_registry().select(
                self._config.enabled_checks, self._config.disabled_checks
            )
        self._registry = registry
        self._preferences = preferences if preferences is not None else MemoryPreferenceStore()
        self._cache = EntityIssueCache(registry)
        self._issues: list[Issue] = []
        self.reload: Channel[list[Issue]] = Channel("reload")

        stored = self._preferences.get(FEATURE_APPLICABILITY_KEY)
        self._feature_applicability: FeatureApplicability = (
            stored if stored in FEATURE_APPLICABILITY_OPTIONS else DEFAULT_FEATURE_APPLICABILITY
        )

    @property
    def registry(self) -> CheckRegistry:
        return self._registry

    @property
    def config(self) -> ValidationConfig:
        return self._config

    # -- Feature applicability -------------------------------------------------

    def get_feature_applicability(self) -> FeatureApplicability:
        return self._feature_applicability

    def set_feature_applicability(self, applicability: FeatureApplicability) -> None:
        """Persist which features the issue list should be shown for.

        Raises:
            ValueError: If the value is not one of the known options.
        """
        if applicability not in FEATURE_APPLICABILITY_OPTIONS:
            raise ValueError(
                f"feature applicability must be one of {FEATURE_APPLICABILITY_OPTIONS}, "
                f"got {applicability!r}"
            )
        self._feature_applicability = applicability
        self._preferences.set(FEATURE_APPLICABILITY_KEY, applicability)
        log.debug("feature_applicability_changed", value=applicability)

    # -- Queries ---------------------------------------------------------------

    def get_issues(self) -> list[Issue]:
        return list(self._issues)

    def get_warnings(self) -> list[Issue]:
        return [issue for issue in self._issues if issue.severity == "warning"]

    def get_errors(self) -> list[Issue]:
        return [issue for issue in self._issues if issue.severity == "error"]

    def get_issues_for_entity_with_id(self, entity_id: str) -> list[Issue]:
        """Issues for a single entity, computed on demand if not cached.

        Does not trigger a full validation pass.
        """
        graph = self._history.graph()
        if not graph.has_entity(entity_id):
            return []
        try:
            return list(self._cache.get(entity_id, self._context()))
        except EntityNotFoundError as e:
            log.debug("entity_vanished", entity_id=entity_id, missing=e.entity_id)
            return []

    def get_issues_for_entities(self, entity_ids: Iterable[str]) -> list[Issue]:
        """Issues from the last pass that reference any of these entities.

        Unlike ``get_issues_for_entity_with_id`` this never runs checks.
        """
        wanted = set(entity_ids)
        return [i for i in self._issues if wanted.intersection(i.entity_ids)]

    def get_displayed_issues(
        self, applicability: FeatureApplicability | None = None
    ) -> list[Issue]:
        """Issues filtered by feature applicability.

        "all" returns every issue. "edited" keeps issues that reference an
        entity the session's edits could have affected (the same expanded
        set a pass re-checks), plus session-wide issues that reference no
        entity at all.

        Args:
            applicability: Override for the stored setting.
        """
        if (applicability or self._feature_applicability) == "all":
            return self.get_issues()
        edited = set(expand(self._history.changes(), self._history.graph()))
        return [i for i in self._issues if not i.entity_ids or edited.intersection(i.entity_ids)]

    # -- Validation ------------------------------------------------------------

    def _context(self) -> CheckContext:
        return CheckContext(
            graph=self._history.graph(),
            config=self._config,
            enabled_checks=frozenset(self._registry.check_names),
        )

    def validate(self) -> None:
        """Run a validation pass and publish the result on ``reload``."""
        self._cache.invalidate_all()

        changes = self._history.changes()
        context = self._context()
        graph = context.graph

        issues: list[Issue] = list(self._registry.run_global_checks(changes, context))

        affected = expand(changes, graph)
        for entity_id in affected:
            try:
                issues.extend(self._cache.get(entity_id, context))
            except EntityNotFoundError as e:
                log.debug("entity_vanished", entity_id=entity_id, missing=e.entity_id)

        self._issues = dedupe_issues(issues)
        log.info(
            "validation_pass_complete",
            changes=changes.summary,
            affected=len(affected),
            issues=len(self._issues),
            errors=sum(1 for i in self._issues if i.severity == "error"),
        )
        self.reload.publish(list(self._issues))
