"""Structured JSONL audit log for tracking operations."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class TrackingEvent:
    """Sanitized record of one tracking call.

    Only file identifiers and counts are recorded; issue messages, content
    hashes and client objects never reach the log.
    """

    timestamp: str
    operation: str
    file: str
    first_analysis: bool
    input_count: int
    output_count: int
    counts: dict[str, int]
    dropped: int
    duration_ms: int


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonlTrackingLogger:
    """Append-only JSONL sink for tracking events."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: TrackingEvent) -> None:
        """Append an event as one JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")
