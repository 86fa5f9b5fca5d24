"""Issue matching cascade and accumulator."""

from .cascade import match, match_raw_issues, match_server_issues
from .keys import (
    RAW_ISSUE_PASSES,
    SERVER_ISSUE_PASSES,
    Matchable,
    MatchPass,
    raw_issue_passes,
    server_issue_passes,
)
from .result import MatchingResult

__all__ = [
    "MatchPass",
    "Matchable",
    "MatchingResult",
    "RAW_ISSUE_PASSES",
    "SERVER_ISSUE_PASSES",
    "match",
    "match_raw_issues",
    "match_server_issues",
    "raw_issue_passes",
    "server_issue_passes",
]
