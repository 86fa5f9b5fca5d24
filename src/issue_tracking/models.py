"""Typed models for tracked issue snapshots."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace

SEVERITIES = ("BLOCKER", "CRITICAL", "MAJOR", "MINOR", "INFO")
ISSUE_TYPES = ("BUG", "VULNERABILITY", "CODE_SMELL", "SECURITY_HOTSPOT")

_handles = itertools.count(1)


def _next_handle() -> int:
    return next(_handles)


@dataclass(slots=True, frozen=True)
class TextRange:
    """Issue location; lines are 1-based, offsets are 0-based columns."""

    start_line: int
    start_line_offset: int
    end_line: int
    end_line_offset: int

    def to_public_dict(self) -> dict[str, int]:
        """Return serializable range snapshot."""
        return {
            "start_line": self.start_line,
            "start_line_offset": self.start_line_offset,
            "end_line": self.end_line,
            "end_line_offset": self.end_line_offset,
        }


@dataclass(slots=True, frozen=True, eq=False)
class Trackable:
    """One snapshot of an issue occurrence.

    Equality and hashing are by identity: two occurrences with identical
    content on the same line are distinct issues. ``handle`` is unique per
    snapshot and is never copied by ``evolve``.
    """

    rule_key: str
    message: str
    line: int | None = None
    text_range: TextRange | None = None
    line_hash: int | None = None
    text_range_hash: int | None = None
    creation_date: int | None = None
    server_issue_key: str | None = None
    resolved: bool = False
    severity: str | None = None
    type: str | None = None
    client_object: object = None
    handle: int = field(default_factory=_next_handle, init=False)

    def __post_init__(self) -> None:
        if self.severity is not None and self.severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {self.severity}")
        if self.type is not None and self.type not in ISSUE_TYPES:
            raise ValueError(f"Unknown issue type: {self.type}")

    @property
    def is_file_level(self) -> bool:
        """True when the issue is attached to the file rather than a location."""
        return self.line is None and self.text_range is None

    def evolve(self, **changes: object) -> Trackable:
        """Return a new snapshot with ``changes`` applied and a fresh handle."""
        return replace(self, **changes)

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable snapshot; the client object is not included."""
        return {
            "handle": self.handle,
            "rule_key": self.rule_key,
            "message": self.message,
            "line": self.line,
            "text_range": None if self.text_range is None else self.text_range.to_public_dict(),
            "line_hash": self.line_hash,
            "text_range_hash": self.text_range_hash,
            "creation_date": self.creation_date,
            "server_issue_key": self.server_issue_key,
            "resolved": self.resolved,
            "severity": self.severity,
            "type": self.type,
        }
