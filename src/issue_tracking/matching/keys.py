"""Search-key extractors for the matching cascade.

Every extractor returns a hashable key, or ``None`` when the item lacks an
attribute the pass needs. Keys are tagged with the pass name, so keys from
different passes never compare equal.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Protocol


class Matchable(Protocol):
    """Minimal attribute view a matching pass may read."""

    @property
    def rule_key(self) -> str: ...

    @property
    def message(self) -> str: ...

    @property
    def line(self) -> int | None: ...

    @property
    def line_hash(self) -> int | None: ...

    @property
    def text_range_hash(self) -> int | None: ...

    @property
    def server_issue_key(self) -> str | None: ...


KeyFn = Callable[[Matchable], Hashable | None]


@dataclass(slots=True, frozen=True)
class MatchPass:
    """One cascade step: a named pair of left/right key extractors."""

    name: str
    left_key: KeyFn
    right_key: KeyFn


def server_issue_key(item: Matchable) -> Hashable | None:
    if item.server_issue_key is None:
        return None
    return ("server_issue_key", item.server_issue_key)


def line_and_text_range_hash(item: Matchable) -> Hashable | None:
    if item.line is None or item.text_range_hash is None:
        return None
    return ("line_and_text_range_hash", item.rule_key, item.line, item.text_range_hash)


def text_range_hash_and_message(item: Matchable) -> Hashable | None:
    if item.text_range_hash is None or item.message is None:
        return None
    return ("text_range_hash_and_message", item.rule_key, item.message, item.text_range_hash)


def line_and_message(item: Matchable) -> Hashable | None:
    if item.line is None or item.message is None:
        return None
    return ("line_and_message", item.rule_key, item.line, item.message)


def text_range_hash(item: Matchable) -> Hashable | None:
    # Same rule moved to another line with a reworded message.
    if item.text_range_hash is None:
        return None
    return ("text_range_hash", item.rule_key, item.text_range_hash)


def line_and_line_hash(item: Matchable) -> Hashable | None:
    if item.line is None or item.line_hash is None:
        return None
    return ("line_and_line_hash", item.rule_key, item.line, item.line_hash)


def line_hash(item: Matchable) -> Hashable | None:
    if item.line_hash is None:
        return None
    return ("line_hash", item.rule_key, item.line_hash)


def file_level_message(item: Matchable) -> Hashable | None:
    if item.line is not None or getattr(item, "text_range", None) is not None:
        return None
    if item.message is None:
        return None
    return ("file_level_message", item.rule_key, item.message)


def _symmetric(name: str, key: KeyFn) -> MatchPass:
    return MatchPass(name=name, left_key=key, right_key=key)


_LOCATION_PASSES = (
    _symmetric("line_and_text_range_hash", line_and_text_range_hash),
    _symmetric("text_range_hash_and_message", text_range_hash_and_message),
    _symmetric("line_and_message", line_and_message),
    _symmetric("text_range_hash", text_range_hash),
    _symmetric("line_and_line_hash", line_and_line_hash),
    _symmetric("line_hash", line_hash),
)
_FILE_LEVEL_PASS = _symmetric("file_level_message", file_level_message)
_SERVER_KEY_PASS = _symmetric("server_issue_key", server_issue_key)


def raw_issue_passes(include_file_level: bool = True) -> tuple[MatchPass, ...]:
    """Passes for matching fresh analysis results against the previous local state."""
    if include_file_level:
        return _LOCATION_PASSES + (_FILE_LEVEL_PASS,)
    return _LOCATION_PASSES


def server_issue_passes(include_file_level: bool = True) -> tuple[MatchPass, ...]:
    """Passes for matching external (server) issues against the local state."""
    return (_SERVER_KEY_PASS,) + raw_issue_passes(include_file_level)


RAW_ISSUE_PASSES = raw_issue_passes()
SERVER_ISSUE_PASSES = server_issue_passes()
