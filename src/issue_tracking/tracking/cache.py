"""Per-file tracked state storage contract and in-memory implementation."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from issue_tracking.models import Trackable


@dataclass(slots=True, frozen=True)
class NeverAnalyzedError(Exception):
    """Raised when tracked state is required for a file that was never tracked."""

    file: str

    def __str__(self) -> str:
        return f"No tracked state for file: {self.file}"


class IssueTrackerCache(Protocol):
    """Storage for the current tracked state of each file.

    Implementations must hand back the stored Trackable objects themselves,
    never re-derived copies.
    """

    def is_first_analysis(self, file: str) -> bool: ...

    def current_state(self, file: str) -> list[Trackable]: ...

    def current_state_or_fail(self, file: str) -> list[Trackable]: ...

    def replace(self, file: str, items: Sequence[Trackable]) -> None: ...

    def clear(self) -> None: ...

    def dispose(self) -> None: ...


class InMemoryIssueTrackerCache:
    """Dict-backed cache preserving insertion order of files and items."""

    def __init__(self) -> None:
        self._entries: dict[str, list[Trackable]] = {}
        self._lock = threading.Lock()
        self._disposed = False

    def is_first_analysis(self, file: str) -> bool:
        with self._lock:
            self._ensure_open()
            return file not in self._entries

    def current_state(self, file: str) -> list[Trackable]:
        """Return the stored items, or an empty list if the file is unknown."""
        with self._lock:
            self._ensure_open()
            return list(self._entries.get(file, ()))

    def current_state_or_fail(self, file: str) -> list[Trackable]:
        """Return the stored items; an empty list means tracked with zero issues."""
        with self._lock:
            self._ensure_open()
            items = self._entries.get(file)
            if items is None:
                raise NeverAnalyzedError(file=file)
            return list(items)

    def replace(self, file: str, items: Sequence[Trackable]) -> None:
        with self._lock:
            self._ensure_open()
            self._entries[file] = list(items)

    def known_files(self) -> tuple[str, ...]:
        """Return tracked file identifiers in first-tracked order."""
        with self._lock:
            self._ensure_open()
            return tuple(self._entries.keys())

    def clear(self) -> None:
        with self._lock:
            self._ensure_open()
            self._entries.clear()

    def dispose(self) -> None:
        with self._lock:
            self._entries.clear()
            self._disposed = True

    def _ensure_open(self) -> None:
        if self._disposed:
            raise RuntimeError("Issue tracker cache has been disposed.")
