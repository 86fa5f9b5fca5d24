"""Per-file issue tracking orchestration."""

from .cache import InMemoryIssueTrackerCache, IssueTrackerCache, NeverAnalyzedError
from .tracker import (
    REBASE_AGAINST_EXTERNAL,
    TRACK_NEW_FINDINGS,
    IssueTracker,
    TrackingReport,
    create_tracker,
)
from .variants import (
    COMBINED,
    DISCONNECTED,
    LEAKED,
    PASSTHROUGH,
    VARIANT_KINDS,
    Combined,
    Disconnected,
    Leaked,
    Passthrough,
    TrackedVariant,
    classify_unmatched,
)

__all__ = [
    "COMBINED",
    "Combined",
    "DISCONNECTED",
    "Disconnected",
    "InMemoryIssueTrackerCache",
    "IssueTracker",
    "IssueTrackerCache",
    "LEAKED",
    "Leaked",
    "NeverAnalyzedError",
    "PASSTHROUGH",
    "Passthrough",
    "REBASE_AGAINST_EXTERNAL",
    "TRACK_NEW_FINDINGS",
    "TrackedVariant",
    "TrackingReport",
    "VARIANT_KINDS",
    "classify_unmatched",
    "create_tracker",
]
