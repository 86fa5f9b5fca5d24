"""Outcomes of matching one issue, as a tagged union over Trackable."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from issue_tracking.models import Trackable

COMBINED = "combined"
LEAKED = "leaked"
DISCONNECTED = "disconnected"
PASSTHROUGH = "passthrough"

VARIANT_KINDS = (COMBINED, LEAKED, DISCONNECTED, PASSTHROUGH)


@dataclass(slots=True, frozen=True)
class Combined:
    """Matched pair: identity from ``base``, position and content from ``moved``."""

    base: Trackable
    moved: Trackable
    inherit_severity: bool
    kind: Literal["combined"] = COMBINED

    def resolve(self) -> Trackable:
        severity = self.moved.severity
        issue_type = self.moved.type
        if self.inherit_severity:
            if self.base.severity is not None:
                severity = self.base.severity
            if self.base.type is not None:
                issue_type = self.base.type
        creation_date = self.base.creation_date
        if creation_date is None:
            # An established date never reverts to None.
            creation_date = self.moved.creation_date
        return self.moved.evolve(
            creation_date=creation_date,
            server_issue_key=self.base.server_issue_key,
            resolved=self.base.resolved,
            severity=severity,
            type=issue_type,
        )


@dataclass(slots=True, frozen=True)
class Leaked:
    """Unmatched occurrence seen for the first time."""

    trackable: Trackable
    now_ms: int
    kind: Literal["leaked"] = LEAKED

    def resolve(self) -> Trackable:
        return self.trackable.evolve(creation_date=self.now_ms)


@dataclass(slots=True, frozen=True)
class Disconnected:
    """Unmatched occurrence whose server counterpart is gone."""

    trackable: Trackable
    kind: Literal["disconnected"] = DISCONNECTED

    def resolve(self) -> Trackable:
        return self.trackable.evolve(server_issue_key=None, resolved=False)


@dataclass(slots=True, frozen=True)
class Passthrough:
    """Unmatched occurrence kept as is."""

    trackable: Trackable
    kind: Literal["passthrough"] = PASSTHROUGH

    def resolve(self) -> Trackable:
        return self.trackable


TrackedVariant = Combined | Leaked | Disconnected | Passthrough


def classify_unmatched(trackable: Trackable, now_ms: int, allow_leak: bool) -> TrackedVariant:
    """Pick the variant for an item that found no counterpart.

    A server-linked item loses its linkage. An item without a creation date
    becomes a leak when ``allow_leak`` is set; everything else passes through.
    """
    if trackable.server_issue_key is not None:
        return Disconnected(trackable)
    if allow_leak and trackable.creation_date is None:
        return Leaked(trackable, now_ms)
    return Passthrough(trackable)


def count_by_kind(variants: list[TrackedVariant]) -> dict[str, int]:
    """Count variants per kind; every kind is present in the output."""
    counts = {kind: 0 for kind in VARIANT_KINDS}
    for variant in variants:
        counts[variant.kind] += 1
    return counts
