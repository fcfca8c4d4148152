"""Picker state: query, cursor and selection over a `FuzzyIndex`.

Rows are drawn bottom-up with the best match next to the prompt, so
`move_up` walks toward worse-ranked matches (a larger cursor).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from sdev.cli.tui.fuzzy import FuzzyIndex, Injector, MatchSnapshot, TickStatus
from sdev.constants import DEFAULT_TICK_BUDGET_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PickerStatus(Enum):
    RUNNING = "running"
    ABORTED = "aborted"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PickerRow:
    rank: int
    text: str
    selected: bool


class Picker(Generic[T]):
    """One ranked candidate list with its own cursor.

    Invariant: 0 <= cursor < max(1, matched_count) after every operation.
    """

    def __init__(
        self,
        title: str,
        project: Callable[[T], str],
        tick_budget_ms: float = DEFAULT_TICK_BUDGET_MS,
    ) -> None:
        self.title = title
        self.tick_budget_ms = tick_budget_ms
        self._index: FuzzyIndex[T] = FuzzyIndex()
        self._injector = self._index.injector(project)
        self._cursor = 0
        self._status = PickerStatus.RUNNING
        self._selection: Optional[T] = None

    @property
    def injector(self) -> Injector[T]:
        return self._injector

    def push(self, item: T) -> None:
        self._injector.push(item)

    @property
    def query(self) -> str:
        return self._index.pattern

    def set_query(self, text: str, is_narrowing: bool) -> None:
        self._index.set_query(text, is_narrowing)
        self._clamp()

    def tick(self) -> TickStatus:
        """Advance ranking by one frame's budget, then re-clamp the cursor."""
        status = self._index.advance(self.tick_budget_ms)
        self._clamp()
        return status

    def snapshot(self) -> MatchSnapshot[T]:
        return self._index.snapshot()

    @property
    def matched_count(self) -> int:
        return self._index.snapshot().matched_count

    @property
    def item_count(self) -> int:
        return self._index.snapshot().item_count

    @property
    def cursor(self) -> int:
        return self._cursor

    def select_at(self, rank: int) -> None:
        self._cursor = max(0, min(rank, self.matched_count - 1))

    def move_up(self) -> None:
        self.select_at(self._cursor + 1)

    def move_down(self) -> None:
        self.select_at(self._cursor - 1)

    def _clamp(self) -> None:
        self.select_at(self._cursor)

    def take_selected(self) -> Optional[T]:
        """Item under the cursor in the current snapshot, None when nothing matches."""
        item = self._index.snapshot().get_matched_item(self._cursor)
        return None if item is None else item.data

    def render_window(self, rows: int) -> list[PickerRow]:
        """Best `rows` matches; only this window is pulled from the snapshot."""
        snapshot = self._index.snapshot()
        stop = min(snapshot.matched_count, max(0, rows))
        return [
            PickerRow(rank=rank, text=item.text, selected=rank == self._cursor)
            for rank, item in enumerate(snapshot.matched_items(0, stop))
        ]

    @property
    def status(self) -> PickerStatus:
        return self._status

    @property
    def selection(self) -> Optional[T]:
        return self._selection

    def complete(self) -> bool:
        """Finish with the item under the cursor; stays running when nothing matches."""
        if self._status is not PickerStatus.RUNNING:
            return False
        selected = self.take_selected()
        if selected is None:
            return False
        self._selection = selected
        self._status = PickerStatus.COMPLETED
        logger.debug("Picker %s completed", self.title)
        return True

    def abort(self) -> None:
        if self._status is PickerStatus.RUNNING:
            self._selection = None
            self._status = PickerStatus.ABORTED


class PickerGroup:
    """Pickers sharing one query buffer and one cursor; exactly one is focused."""

    def __init__(self, pickers: Sequence[Picker[Any]], focused: int = 0) -> None:
        if not pickers:
            raise ValueError("PickerGroup needs at least one picker")
        self.pickers = list(pickers)
        self._focused = focused % len(self.pickers)
        self._query = ""

    @property
    def active(self) -> Picker[Any]:
        return self.pickers[self._focused]

    @property
    def focused(self) -> int:
        return self._focused

    @property
    def query(self) -> str:
        return self._query

    def _reparse(self, is_narrowing: bool) -> None:
        for picker in self.pickers:
            picker.set_query(self._query, is_narrowing)

    def push_char(self, char: str) -> None:
        self._query += char
        self._reparse(is_narrowing=True)

    def pop_char(self) -> None:
        if not self._query:
            return
        self._query = self._query[:-1]
        self._reparse(is_narrowing=False)

    def clear_query(self) -> None:
        if not self._query:
            return
        self._query = ""
        self._reparse(is_narrowing=False)

    def toggle(self) -> None:
        """Focus the next picker, carrying the cursor over and re-clamping it."""
        if len(self.pickers) < 2:
            return
        cursor = self.active.cursor
        self._focused = (self._focused + 1) % len(self.pickers)
        # only the active picker is ticked, so the newly focused one may be stale
        self.active.tick()
        self.active.select_at(cursor)

    def tick(self) -> TickStatus:
        return self.active.tick()

    def move_up(self) -> None:
        self.active.move_up()

    def move_down(self) -> None:
        self.active.move_down()

    def complete(self) -> bool:
        return self.active.complete()

    def abort(self) -> None:
        self.active.abort()

    @property
    def status(self) -> PickerStatus:
        return self.active.status

    @property
    def selection(self) -> Any:
        return self.active.selection
