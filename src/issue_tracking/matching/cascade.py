"""Greedy, priority-ordered matching cascade."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import TypeVar

from issue_tracking.matching.keys import (
    RAW_ISSUE_PASSES,
    SERVER_ISSUE_PASSES,
    Matchable,
    MatchPass,
)
from issue_tracking.matching.result import MatchingResult

L = TypeVar("L", bound=Matchable)
R = TypeVar("R", bound=Matchable)


def match(
    lefts: Sequence[L],
    rights: Sequence[R],
    passes: Sequence[MatchPass],
) -> MatchingResult[L, R]:
    """Match ``lefts`` against ``rights`` running ``passes`` strongest first.

    Each pass only sees items left unmatched by earlier passes. Remaining
    passes are skipped as soon as every left item is matched.
    """
    result: MatchingResult[L, R] = MatchingResult(lefts, rights)
    for match_pass in passes:
        if result.is_complete():
            break
        _run_pass(result, match_pass)
    return result


def _run_pass(result: MatchingResult[L, R], match_pass: MatchPass) -> None:
    buckets: dict[Hashable, list[R]] = {}
    for right in result.unmatched_rights():
        key = match_pass.right_key(right)
        if key is not None:
            buckets.setdefault(key, []).append(right)
    if not buckets:
        return

    for left in result.unmatched_lefts():
        key = match_pass.left_key(left)
        if key is None:
            continue
        candidates = buckets.get(key)
        if not candidates:
            continue
        # First candidate in input order wins; no scoring between candidates.
        result.match(left, candidates.pop(0))


def match_raw_issues(
    new_items: Sequence[L],
    previous_items: Sequence[R],
    passes: Sequence[MatchPass] = RAW_ISSUE_PASSES,
) -> MatchingResult[L, R]:
    """Match fresh analysis results (left) against the previous local state (right)."""
    return match(new_items, previous_items, passes)


def match_server_issues(
    base_items: Sequence[L],
    current_items: Sequence[R],
    passes: Sequence[MatchPass] = SERVER_ISSUE_PASSES,
) -> MatchingResult[L, R]:
    """Match external base issues (left) against the current local state (right)."""
    return match(base_items, current_items, passes)
