"""Whitespace-insensitive content fingerprints for issue locations."""

from __future__ import annotations

import hashlib

from issue_tracking.models import TextRange, Trackable


def content_hash(text: str) -> int:
    """Return a stable signed 32-bit hash of ``text`` ignoring all whitespace."""
    compact = "".join(text.split())
    digest = hashlib.sha256(compact.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big", signed=True)


def line_hash(source: str, line: int) -> int | None:
    """Hash of the 1-based ``line`` of ``source``, or None when out of range."""
    lines = _source_lines(source)
    if line < 1 or line > len(lines):
        return None
    return content_hash(lines[line - 1])


def text_range_hash(source: str, text_range: TextRange) -> int | None:
    """Hash of the text covered by ``text_range``, or None when out of bounds."""
    excerpt = _range_excerpt(_source_lines(source), text_range)
    if excerpt is None:
        return None
    return content_hash(excerpt)


def fingerprint(trackable: Trackable, source: str) -> Trackable:
    """Return ``trackable`` with hashes computed from its location in ``source``.

    Hashes the item has no location for are left untouched.
    """
    changes: dict[str, object] = {}
    if trackable.line is not None:
        changes["line_hash"] = line_hash(source, trackable.line)
    if trackable.text_range is not None:
        changes["text_range_hash"] = text_range_hash(source, trackable.text_range)
    if not changes:
        return trackable
    return trackable.evolve(**changes)


def _source_lines(source: str) -> list[str]:
    # Only CR, LF and CRLF end a line; form feeds and Unicode separators do not.
    lines = source.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def _range_excerpt(lines: list[str], text_range: TextRange) -> str | None:
    start = text_range.start_line
    end = text_range.end_line
    if start < 1 or end > len(lines) or start > end:
        return None
    first = lines[start - 1]
    last = lines[end - 1]
    if text_range.start_line_offset < 0 or text_range.start_line_offset > len(first):
        return None
    if text_range.end_line_offset < 0 or text_range.end_line_offset > len(last):
        return None
    if start == end:
        if text_range.start_line_offset > text_range.end_line_offset:
            return None
        return first[text_range.start_line_offset : text_range.end_line_offset]
    parts = [first[text_range.start_line_offset :]]
    parts.extend(lines[start : end - 1])
    parts.append(last[: text_range.end_line_offset])
    return "\n".join(parts)
