"""Caching issue tracker: keeps per-file issue identity across runs."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from issue_tracking.config import ConfigOverrides, TrackingSettings, load_effective_config
from issue_tracking.logging import JsonlTrackingLogger, TrackingEvent, utc_timestamp
from issue_tracking.matching import match, raw_issue_passes, server_issue_passes
from issue_tracking.models import Trackable
from issue_tracking.tracking.cache import InMemoryIssueTrackerCache, IssueTrackerCache
from issue_tracking.tracking.variants import (
    Combined,
    Passthrough,
    TrackedVariant,
    classify_unmatched,
    count_by_kind,
)

TRACK_NEW_FINDINGS = "track_new_findings"
REBASE_AGAINST_EXTERNAL = "rebase_against_external"


@dataclass(slots=True, frozen=True)
class TrackingReport:
    """Outcome summary of one tracking call."""

    operation: str
    file: str
    first_analysis: bool
    input_count: int
    output_count: int
    counts: dict[str, int]
    dropped: int
    duration_ms: int


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _distinct(file: str, items: Iterable[Trackable]) -> list[Trackable]:
    """Materialize ``items``, rejecting an issue object listed more than once."""
    materialized = list(items)
    if len({id(item) for item in materialized}) != len(materialized):
        raise ValueError(f"Duplicate issue object in input for file: {file}")
    return materialized


class IssueTracker:
    """Matches issue snapshots against the cached state of each file.

    Two phases feed the same per-file slot: fresh analysis results are matched
    against the previous local state, and external (server) issues are used as
    a base to rebase the local state. Every call replaces the slot wholesale.
    All public operations are serialized by a single lock.
    """

    def __init__(
        self,
        cache: IssueTrackerCache,
        settings: TrackingSettings | None = None,
        audit_logger: JsonlTrackingLogger | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._cache = cache
        self._settings = settings or TrackingSettings()
        self._audit_logger = audit_logger
        self._clock = clock or _wall_clock_ms
        self._lock = threading.Lock()
        self._raw_passes = raw_issue_passes(self._settings.match_file_level_issues)
        self._server_passes = server_issue_passes(self._settings.match_file_level_issues)
        self._last_report: TrackingReport | None = None

    @property
    def settings(self) -> TrackingSettings:
        return self._settings

    @property
    def last_report(self) -> TrackingReport | None:
        """Summary of the most recent tracking call, if any."""
        return self._last_report

    def track_new_findings(self, file: str, new_items: Iterable[Trackable]) -> list[Trackable]:
        """Match fresh analysis results against the previous state of ``file``.

        On the first analysis of a file the results become the state as is,
        without creation dates. Afterwards, matched items keep the identity of
        their previous copy, new items are stamped as leaks, and previous
        items that were not reported again are dropped.
        """
        with self._lock:
            started = time.perf_counter()
            items = _distinct(file, new_items)
            if self._cache.is_first_analysis(file):
                self._cache.replace(file, items)
                self._finish(
                    TRACK_NEW_FINDINGS,
                    file,
                    first_analysis=True,
                    input_count=len(items),
                    variants=[Passthrough(item) for item in items],
                    dropped=0,
                    started=started,
                )
                return list(items)

            previous = self._cache.current_state(file)
            now_ms = self._clock()
            result = match(items, previous, self._raw_passes)
            variants: list[TrackedVariant] = []
            for item in items:
                known = result.right_for(item)
                if known is None:
                    variants.append(classify_unmatched(item, now_ms, allow_leak=True))
                else:
                    variants.append(Combined(base=known, moved=item, inherit_severity=False))
            tracked = [variant.resolve() for variant in variants]
            self._cache.replace(file, tracked)
            self._finish(
                TRACK_NEW_FINDINGS,
                file,
                first_analysis=False,
                input_count=len(items),
                variants=variants,
                dropped=len(result.unmatched_rights()),
                started=started,
            )
            return list(tracked)

    def rebase_against_external(
        self, file: str, base_items: Iterable[Trackable]
    ) -> list[Trackable]:
        """Rebase the tracked state of ``file`` on externally reported issues.

        Raises NeverAnalyzedError if ``file`` was never tracked. Matched items
        take identity and triage state from the external copy while keeping
        local position and content. Local items the external source no longer
        reports lose their server linkage. External items without a local
        counterpart are discarded.
        """
        with self._lock:
            started = time.perf_counter()
            current = self._cache.current_state_or_fail(file)
            base = _distinct(file, base_items)
            if not current:
                self._finish(
                    REBASE_AGAINST_EXTERNAL,
                    file,
                    first_analysis=False,
                    input_count=len(base),
                    variants=[],
                    dropped=len(base),
                    started=started,
                )
                return []

            now_ms = self._clock()
            result = match(base, current, self._server_passes)
            inherit = self._settings.inherit_server_severity
            variants: list[TrackedVariant] = []
            for item in current:
                external = result.left_for(item)
                if external is None:
                    variants.append(classify_unmatched(item, now_ms, allow_leak=False))
                else:
                    variants.append(Combined(base=external, moved=item, inherit_severity=inherit))
            tracked = [variant.resolve() for variant in variants]
            self._cache.replace(file, tracked)
            self._finish(
                REBASE_AGAINST_EXTERNAL,
                file,
                first_analysis=False,
                input_count=len(base),
                variants=variants,
                dropped=len(result.unmatched_lefts()),
                started=started,
            )
            return list(tracked)

    def reset(self) -> None:
        """Forget the tracked state of every file."""
        with self._lock:
            self._cache.clear()
            self._last_report = None

    def dispose(self) -> None:
        """Release cache resources; the tracker must not be used afterwards."""
        with self._lock:
            self._cache.dispose()

    def _finish(
        self,
        operation: str,
        file: str,
        first_analysis: bool,
        input_count: int,
        variants: list[TrackedVariant],
        dropped: int,
        started: float,
    ) -> None:
        report = TrackingReport(
            operation=operation,
            file=file,
            first_analysis=first_analysis,
            input_count=input_count,
            output_count=len(variants),
            counts=count_by_kind(variants),
            dropped=dropped,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        self._last_report = report
        if self._audit_logger is None:
            return
        self._audit_logger.append(
            TrackingEvent(
                timestamp=utc_timestamp(),
                operation=report.operation,
                file=report.file,
                first_analysis=report.first_analysis,
                input_count=report.input_count,
                output_count=report.output_count,
                counts=dict(report.counts),
                dropped=report.dropped,
                duration_ms=report.duration_ms,
            )
        )


def create_tracker(
    project_root: str | Path = ".",
    cache: IssueTrackerCache | None = None,
    overrides: ConfigOverrides | None = None,
    clock: Callable[[], int] | None = None,
) -> IssueTracker:
    """Build a tracker from the effective config of ``project_root``."""
    config = load_effective_config(Path(project_root), overrides)
    audit_logger = JsonlTrackingLogger(config.audit_path) if config.audit.enabled else None
    return IssueTracker(
        cache=cache if cache is not None else InMemoryIssueTrackerCache(),
        settings=config.tracking,
        audit_logger=audit_logger,
        clock=clock,
    )
