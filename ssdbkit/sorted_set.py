"""A set of unique keys kept ordered by score, then by key."""

from __future__ import annotations

from typing import Iterator

from sortedcontainers import SortedList


class SortedSet:
    """Keys with integer scores, ordered by (score, key)."""

    def __init__(self) -> None:
        self._scores: dict[str, int] = {}
        self._items: SortedList = SortedList()

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, key: object) -> bool:
        return key in self._scores

    def __iter__(self) -> Iterator[tuple[str, int]]:
        for score, key in self._items:
            yield key, score

    def empty(self) -> bool:
        return not self._scores

    def add(self, key: str, score: int) -> bool:
        """Insert or rescore a key; True only if the key was new."""
        if key in self._scores:
            old = self._scores[key]
            if old == score:
                return False
            self._items.remove((old, key))
            self._items.add((score, key))
            self._scores[key] = score
            return False
        self._items.add((score, key))
        self._scores[key] = score
        return True

    def delete(self, key: str) -> bool:
        """Remove a key; True if it was present."""
        if key not in self._scores:
            return False
        score = self._scores.pop(key)
        self._items.remove((score, key))
        return True

    def front(self) -> tuple[str, int] | None:
        """The (key, score) with the lowest order, or None when empty."""
        if not self._items:
            return None
        score, key = self._items[0]
        return key, score

    def back(self) -> tuple[str, int] | None:
        """The (key, score) with the highest order, or None when empty."""
        if not self._items:
            return None
        score, key = self._items[-1]
        return key, score

    def max_score(self) -> int:
        """Score of the last item, 0 when empty."""
        last = self.back()
        return 0 if last is None else last[1]

    def pop_front(self) -> tuple[str, int] | None:
        """Remove and return the first (key, score); None when empty."""
        if not self._items:
            return None
        score, key = self._items.pop(0)
        del self._scores[key]
        return key, score

    def pop_back(self) -> tuple[str, int] | None:
        """Remove and return the last (key, score); None when empty."""
        if not self._items:
            return None
        score, key = self._items.pop()
        del self._scores[key]
        return key, score