from __future__ import annotations

import pytest

from issue_tracking.models import Trackable
from issue_tracking.tracking import InMemoryIssueTrackerCache, NeverAnalyzedError


def test_unknown_file_is_first_analysis_with_empty_state() -> None:
    cache = InMemoryIssueTrackerCache()

    assert cache.is_first_analysis("a.py") is True
    assert cache.current_state("a.py") == []
    with pytest.raises(NeverAnalyzedError) as excinfo:
        cache.current_state_or_fail("a.py")
    assert excinfo.value.file == "a.py"
    assert "a.py" in str(excinfo.value)


def test_empty_state_is_distinct_from_never_analyzed() -> None:
    cache = InMemoryIssueTrackerCache()

    cache.replace("a.py", [])

    assert cache.is_first_analysis("a.py") is False
    assert cache.current_state_or_fail("a.py") == []


def test_stored_items_keep_identity() -> None:
    cache = InMemoryIssueTrackerCache()
    items = [Trackable(rule_key="r", message="m"), Trackable(rule_key="r", message="m")]

    cache.replace("a.py", items)
    stored = cache.current_state("a.py")

    assert stored is not items
    assert all(s is i for s, i in zip(stored, items))


def test_returned_list_does_not_alias_cache() -> None:
    cache = InMemoryIssueTrackerCache()
    cache.replace("a.py", [Trackable(rule_key="r", message="m")])

    cache.current_state("a.py").clear()

    assert len(cache.current_state("a.py")) == 1


def test_clear_forgets_all_files() -> None:
    cache = InMemoryIssueTrackerCache()
    cache.replace("b.py", [])
    cache.replace("a.py", [])
    assert cache.known_files() == ("b.py", "a.py")

    cache.clear()

    assert cache.known_files() == ()
    assert cache.is_first_analysis("a.py") is True


def test_disposed_cache_rejects_use() -> None:
    cache = InMemoryIssueTrackerCache()
    cache.dispose()

    with pytest.raises(RuntimeError, match="disposed"):
        cache.current_state("a.py")
