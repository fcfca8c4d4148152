"""curses frame loop for the picker.

Each frame: advance ranking by the picker's budget, draw, then wait at most
`poll_interval_ms` for one key. `curses.wrapper` owns raw-mode acquisition and
restores the terminal on every exit path, including exceptions.
"""

from __future__ import annotations

import curses
import logging
import os
from typing import Any, Optional, Union

from sdev.cli.tui.picker import PickerGroup, PickerStatus
from sdev.constants import DEFAULT_POLL_INTERVAL_MS, ESC_DELAY_MS, PROMPT_CHEVRON

logger = logging.getLogger(__name__)

Key = Union[str, int]

KEY_ESC = "\x1b"
KEY_CTRL_C = "\x03"
KEY_CTRL_N = "\x0e"
KEY_CTRL_P = "\x10"
KEY_CTRL_U = "\x15"
KEY_TAB = "\t"
_ENTER_KEYS: tuple[Key, ...] = ("\n", "\r", curses.KEY_ENTER)
_BACKSPACE_KEYS: tuple[Key, ...] = ("\x7f", "\b", curses.KEY_BACKSPACE)

PROMPT_COLOR_PAIR = 1


def handle_key(group: PickerGroup, key: Key) -> None:
    """Apply one key press to the picker group."""
    if key in (KEY_ESC, KEY_CTRL_C):
        group.abort()
    elif key in _ENTER_KEYS:
        group.complete()
    elif key in _BACKSPACE_KEYS:
        group.pop_char()
    elif key == KEY_CTRL_U:
        group.clear_query()
    elif key in (curses.KEY_UP, KEY_CTRL_P):
        group.move_up()
    elif key in (curses.KEY_DOWN, KEY_CTRL_N):
        group.move_down()
    elif key in (KEY_TAB, curses.KEY_BTAB):
        group.toggle()
    elif isinstance(key, str) and key.isprintable():
        group.push_char(key)


def _put(stdscr: "curses.window", y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> None:
    """addstr clipped to the window; the bottom-right cell is never written."""
    height, width = stdscr.getmaxyx()
    if not 0 <= y < height or x >= width - 1:
        return
    stdscr.addstr(y, x, text[: width - 1 - x], attr)


class PickerApp:
    def __init__(self, group: PickerGroup, poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS) -> None:
        self.group = group
        self.poll_interval_ms = poll_interval_ms
        self._prompt_attr = curses.A_BOLD

    def run(self) -> Optional[Any]:
        """Run until the user completes or aborts; returns the selection or None."""
        os.environ.setdefault("ESCDELAY", str(ESC_DELAY_MS))
        curses.wrapper(self._loop)
        if self.group.status is PickerStatus.COMPLETED:
            return self.group.selection
        logger.info("Picker aborted")
        return None

    def _setup(self, stdscr: "curses.window") -> None:
        # raw mode delivers Ctrl-C as a key instead of SIGINT
        curses.raw()
        stdscr.timeout(self.poll_interval_ms)
        if curses.has_colors():
            curses.start_color()
            background = -1
            try:
                curses.use_default_colors()
            except curses.error:
                background = curses.COLOR_BLACK
            curses.init_pair(PROMPT_COLOR_PAIR, curses.COLOR_MAGENTA, background)
            self._prompt_attr = curses.color_pair(PROMPT_COLOR_PAIR) | curses.A_BOLD

    def _loop(self, stdscr: "curses.window") -> None:
        self._setup(stdscr)
        while self.group.status is PickerStatus.RUNNING:
            self.group.tick()
            self.draw(stdscr)
            key = self._read_key(stdscr)
            if key is not None:
                handle_key(self.group, key)

    @staticmethod
    def _read_key(stdscr: "curses.window") -> Optional[Key]:
        try:
            return stdscr.get_wch()
        except curses.error:
            # no input before the poll timeout
            return None

    def draw(self, stdscr: "curses.window") -> None:
        stdscr.erase()
        height, width = stdscr.getmaxyx()
        active = self.group.active

        x = 0
        for index, picker in enumerate(self.group.pickers):
            label = f" {picker.title} "
            attr = curses.A_REVERSE if index == self.group.focused else curses.A_DIM
            _put(stdscr, 0, x, label, attr)
            x += len(label) + 1
        _put(stdscr, 0, x, f"{active.matched_count}/{active.item_count}", curses.A_DIM)

        list_rows = max(0, height - 2)
        if list_rows and active.cursor >= list_rows:
            active.select_at(list_rows - 1)
        for row in active.render_window(list_rows):
            attr = curses.A_REVERSE | curses.A_BOLD if row.selected else curses.A_NORMAL
            marker = PROMPT_CHEVRON if row.selected else " " * len(PROMPT_CHEVRON)
            _put(stdscr, height - 2 - row.rank, 0, f"{marker}{row.text}", attr)

        prompt_y = height - 1
        _put(stdscr, prompt_y, 0, PROMPT_CHEVRON, self._prompt_attr)
        _put(stdscr, prompt_y, len(PROMPT_CHEVRON), self.group.query, curses.A_BOLD)
        cursor_x = len(PROMPT_CHEVRON) + len(self.group.query)
        if prompt_y >= 0 and cursor_x < width - 1:
            stdscr.move(prompt_y, cursor_x)
        stdscr.refresh()
