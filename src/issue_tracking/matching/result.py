"""Bipartite matching accumulator keyed by object identity."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

L = TypeVar("L")
R = TypeVar("R")


class MatchingResult(Generic[L, R]):
    """Partial injective matching between a left and a right collection.

    Items are identified by reference, never by value equality. Both
    collections are kept alive by the result, so ``id()`` keys stay valid for
    its whole lifetime.
    """

    def __init__(self, lefts: Sequence[L], rights: Sequence[R]) -> None:
        self._lefts = tuple(lefts)
        self._rights = tuple(rights)
        self._left_to_right: dict[int, R] = {}
        self._right_to_left: dict[int, L] = {}

    @property
    def lefts(self) -> tuple[L, ...]:
        return self._lefts

    @property
    def rights(self) -> tuple[R, ...]:
        return self._rights

    def match(self, left: L, right: R) -> None:
        """Record ``left`` <-> ``right``; each side may be matched only once."""
        if id(left) in self._left_to_right:
            raise ValueError("left item is already matched")
        if id(right) in self._right_to_left:
            raise ValueError("right item is already matched")
        self._left_to_right[id(left)] = right
        self._right_to_left[id(right)] = left

    def is_complete(self) -> bool:
        """True when every left item has a match."""
        return len(self._left_to_right) == len(self._lefts)

    def right_for(self, left: L) -> R | None:
        return self._left_to_right.get(id(left))

    def left_for(self, right: R) -> L | None:
        return self._right_to_left.get(id(right))

    def matched_lefts(self) -> list[tuple[L, R]]:
        """Matched pairs in left input order."""
        return [
            (left, self._left_to_right[id(left)])
            for left in self._lefts
            if id(left) in self._left_to_right
        ]

    def unmatched_lefts(self) -> list[L]:
        """Unmatched left items in input order.

        Returns a new list, so callers may record matches while iterating.
        """
        return [left for left in self._lefts if id(left) not in self._left_to_right]

    def unmatched_rights(self) -> list[R]:
        """Unmatched right items in input order."""
        return [right for right in self._rights if id(right) not in self._right_to_left]

    @property
    def matched_count(self) -> int:
        return len(self._left_to_right)
