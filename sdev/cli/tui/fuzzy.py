"""Incremental fuzzy index over a growing candidate set.

Producers push items from any thread through an `Injector`; the UI thread
calls `set_query()` on edits and `advance()` once per frame. `advance()` does a
time-boxed slice of matching work, so a large candidate set converges over
several frames instead of stalling one. Scoring is delegated to textual's
`FuzzySearch`.

Concurrency: the item list is append-only and guarded by a lock for appends.
Each item is fully built before it is appended, so the UI thread never sees a
partial item. All match state is owned by the UI thread.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, Optional, Sequence, TypeVar

from textual.fuzzy import FuzzySearch

T = TypeVar("T")

EMPTY_PATTERN_SCORE = 1.0


@dataclass(frozen=True)
class IndexedItem(Generic[T]):
    data: T
    text: str


@dataclass(frozen=True)
class TickStatus:
    changed: bool  # visible ordering differs from the previous snapshot
    running: bool  # matching work is still pending


class MatchSnapshot(Generic[T]):
    """Point-in-time ranked view. Items are only pulled for the requested range."""

    def __init__(self, items: Sequence[IndexedItem[T]], ranking: tuple[int, ...], item_count: int) -> None:
        self._items = items
        self._ranking = ranking
        self._item_count = item_count

    @property
    def matched_count(self) -> int:
        return len(self._ranking)

    @property
    def item_count(self) -> int:
        """Items known to the index when this snapshot was taken."""
        return self._item_count

    def matched_items(self, start: int = 0, stop: Optional[int] = None) -> Iterator[IndexedItem[T]]:
        """Yield matched items with rank in [start, stop), best first."""
        end = self.matched_count if stop is None else min(stop, self.matched_count)
        for rank in range(max(0, start), end):
            yield self._items[self._ranking[rank]]

    def get_matched_item(self, rank: int) -> Optional[IndexedItem[T]]:
        if 0 <= rank < self.matched_count:
            return self._items[self._ranking[rank]]
        return None


class Injector(Generic[T]):
    """Push handle for producers; projects each item to its search text."""

    def __init__(self, index: "FuzzyIndex[T]", project: Callable[[T], str]) -> None:
        self._index = index
        self._project = project

    def push(self, data: T) -> None:
        self._index.push(data, self._project(data))


def _smart_case(pattern: str) -> bool:
    """Case-sensitive only when the pattern contains an uppercase letter."""
    return any(char.isupper() for char in pattern)


class FuzzyIndex(Generic[T]):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: list[IndexedItem[T]] = []

        # UI-thread state
        self._pattern = ""
        self._search: Optional[FuzzySearch] = None
        self._scores: dict[int, float] = {}
        self._scanned = 0  # items below this index were tested against the current pattern
        self._recheck: list[int] = []  # previous matches still to re-test after a narrowing edit
        self._dirty = False
        self._snapshot: MatchSnapshot[T] = MatchSnapshot(self._items, (), 0)

    def injector(self, project: Callable[[T], str]) -> Injector[T]:
        return Injector(self, project)

    def push(self, data: T, text: str) -> None:
        """Register an item; it is matched on a later `advance()`."""
        item = IndexedItem(data, text)
        with self._lock:
            self._items.append(item)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def pattern(self) -> str:
        return self._pattern

    def set_query(self, text: str, is_narrowing: bool) -> None:
        """Replace the pattern.

        Narrowing re-tests only the current matches (plus items not scanned
        yet). It is honoured only when `text` extends the previous pattern;
        anything else rescans every item.
        """
        if text == self._pattern:
            return
        narrowing = is_narrowing and text.startswith(self._pattern)
        self._pattern = text
        self._search = FuzzySearch(case_sensitive=_smart_case(text)) if text else None

        if narrowing:
            self._recheck = sorted(self._scores, reverse=True)
        else:
            self._scores = {}
            self._recheck = []
            self._scanned = 0
        self._dirty = True

    def _score(self, text: str) -> float:
        if self._search is None:
            return EMPTY_PATTERN_SCORE
        return self._search.match(self._pattern, text)[0]

    def advance(self, budget_ms: float) -> TickStatus:
        """Do up to `budget_ms` of matching work and refresh the snapshot.

        At least one item is processed per call so progress is guaranteed even
        with a zero budget.
        """
        deadline = time.monotonic() + budget_ms / 1000
        with self._lock:
            total = len(self._items)
        items = self._items
        processed = 0

        while self._recheck:
            if processed and time.monotonic() >= deadline:
                break
            index = self._recheck.pop()
            score = self._score(items[index].text)
            if score > 0:
                self._scores[index] = score
            else:
                del self._scores[index]
            self._dirty = True
            processed += 1

        if not self._recheck:
            while self._scanned < total:
                if processed and time.monotonic() >= deadline:
                    break
                score = self._score(items[self._scanned].text)
                if score > 0:
                    self._scores[self._scanned] = score
                    self._dirty = True
                self._scanned += 1
                processed += 1

        running = bool(self._recheck) or self._scanned < total
        changed = self._dirty
        if self._dirty or total != self._snapshot.item_count:
            self._snapshot = MatchSnapshot(items, self._rank(), total)
            self._dirty = False
        return TickStatus(changed=changed, running=running)

    def _rank(self) -> tuple[int, ...]:
        scores = self._scores
        # best score first, insertion order breaks ties
        return tuple(sorted(scores, key=lambda index: (-scores[index], index)))

    def snapshot(self) -> MatchSnapshot[T]:
        return self._snapshot
