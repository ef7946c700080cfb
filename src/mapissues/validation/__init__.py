"""Incremental issue validation.

The IssueManager re-checks only the entities an edit could have affected,
caches per-entity results, and publishes the merged, deduplicated issue
list to subscribers of its ``reload`` channel.
"""

from mapissues.validation.cache import EntityIssueCache
from mapissues.validation.issue import SEVERITIES, Issue, Severity, dedupe_issues, issue_key
from mapissues.validation.manager import (
    DEFAULT_FEATURE_APPLICABILITY,
    FEATURE_APPLICABILITY_KEY,
    FEATURE_APPLICABILITY_OPTIONS,
    FeatureApplicability,
    IssueManager,
)
from mapissues.validation.propagation import expand
from mapissues.validation.registry import CheckContext, CheckMeta, CheckRegistry

__all__ = [
    "DEFAULT_FEATURE_APPLICABILITY",
    "FEATURE_APPLICABILITY_KEY",
    "FEATURE_APPLICABILITY_OPTIONS",
    "SEVERITIES",
    "CheckContext",
    "CheckMeta",
    "CheckRegistry",
    "EntityIssueCache",
    "FeatureApplicability",
    "Issue",
    "IssueManager",
    "Severity",
    "dedupe_issues",
    "expand",
    "issue_key",
]
