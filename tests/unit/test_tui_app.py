"""Unit tests for picker key handling and frame drawing."""

from __future__ import annotations

import curses

import pytest

from sdev.cli.tui import app as app_module
from sdev.cli.tui.app import PickerApp, handle_key
from sdev.cli.tui.picker import Picker, PickerGroup, PickerStatus


class FakeScreen:
    """Records addstr calls on a fixed-size grid."""

    def __init__(self, height: int = 6, width: int = 40, keys=()):
        self.height = height
        self.width = width
        self.keys = list(keys)
        self.writes: dict[int, str] = {}
        self.cursor = None

    def getmaxyx(self):
        return self.height, self.width

    def erase(self):
        self.writes = {}

    def addstr(self, y, x, text, attr=0):
        line = self.writes.get(y, "").ljust(x)
        self.writes[y] = line[:x] + text + line[x + len(text) :]

    def move(self, y, x):
        self.cursor = (y, x)

    def refresh(self):
        pass

    def timeout(self, _ms):
        pass

    def get_wch(self):
        if not self.keys:
            raise curses.error("no input")
        return self.keys.pop(0)


def settle(group: PickerGroup) -> None:
    for picker in group.pickers:
        while picker.tick().running:
            pass


def make_group() -> PickerGroup:
    repos: Picker[str] = Picker("repos", lambda text: text)
    sessions: Picker[str] = Picker("sessions", lambda text: text)
    for text in ["rails/rails", "ruby/ruby", "raise-the-roof"]:
        repos.push(text)
    sessions.push("main")
    group = PickerGroup([repos, sessions])
    settle(group)
    return group


class TestHandleKey:
    def test_printable_characters_extend_the_query(self) -> None:
        group = make_group()
        for key in "rai":
            handle_key(group, key)
        assert group.query == "rai"

    def test_backspace_and_ctrl_u_edit_the_query(self) -> None:
        group = make_group()
        for key in "rai":
            handle_key(group, key)

        handle_key(group, curses.KEY_BACKSPACE)
        assert group.query == "ra"
        handle_key(group, "\x7f")
        assert group.query == "r"
        handle_key(group, "x")
        handle_key(group, "\x15")
        assert group.query == ""

    def test_navigation_keys(self) -> None:
        group = make_group()
        handle_key(group, curses.KEY_UP)
        handle_key(group, "\x10")
        assert group.active.cursor == 2
        handle_key(group, curses.KEY_DOWN)
        assert group.active.cursor == 1
        handle_key(group, "\x0e")
        assert group.active.cursor == 0

    def test_tab_toggles_mode(self) -> None:
        group = make_group()
        handle_key(group, "\t")
        assert group.active.title == "sessions"

    def test_enter_completes(self) -> None:
        group = make_group()
        handle_key(group, "\n")
        assert group.status is PickerStatus.COMPLETED
        assert group.selection == "rails/rails"

    @pytest.mark.parametrize("key", ["\x1b", "\x03"])
    def test_escape_and_ctrl_c_abort(self, key) -> None:
        group = make_group()
        handle_key(group, key)
        assert group.status is PickerStatus.ABORTED

    def test_unmapped_keys_are_ignored(self) -> None:
        group = make_group()
        handle_key(group, curses.KEY_F1)
        handle_key(group, "\x07")
        assert group.query == ""
        assert group.status is PickerStatus.RUNNING


class TestDraw:
    def test_rows_are_drawn_bottom_up_above_the_prompt(self) -> None:
        group = make_group()
        handle_key(group, "r")
        settle(group)
        group.move_up()
        screen = FakeScreen(height=6)

        PickerApp(group).draw(screen)

        assert screen.writes[5] == "> r"
        assert screen.writes[4].strip() == "rails/rails"
        assert screen.writes[3] == "> ruby/ruby"
        assert screen.writes[2].strip() == "raise-the-roof"
        assert screen.cursor == (5, 3)

    def test_header_shows_modes_and_counts(self) -> None:
        group = make_group()
        screen = FakeScreen()

        PickerApp(group).draw(screen)

        assert "repos" in screen.writes[0]
        assert "sessions" in screen.writes[0]
        assert "3/3" in screen.writes[0]

    def test_cursor_is_kept_inside_the_drawn_rows(self) -> None:
        group = make_group()
        group.move_up()
        group.move_up()
        screen = FakeScreen(height=4)

        PickerApp(group).draw(screen)

        assert group.active.cursor == 1
        assert screen.writes[1] == "> ruby/ruby"
        handle_key(group, "\n")
        assert group.selection == "ruby/ruby"

    def test_small_window_only_draws_what_fits(self) -> None:
        group = make_group()
        screen = FakeScreen(height=3, width=8)

        PickerApp(group).draw(screen)

        assert set(screen.writes) == {0, 1, 2}
        assert all(len(line) <= 7 for line in screen.writes.values())


class TestRun:
    def test_completed_run_returns_selection(self, monkeypatch) -> None:
        group = make_group()
        screen = FakeScreen(keys=["r", "u", "\n"])
        monkeypatch.setattr(app_module.curses, "wrapper", lambda loop: loop(screen))
        monkeypatch.setattr(PickerApp, "_setup", lambda self, stdscr: None)
        monkeypatch.setenv("ESCDELAY", "25")

        assert PickerApp(group).run() == "ruby/ruby"

    def test_aborted_run_returns_none(self, monkeypatch) -> None:
        group = make_group()
        screen = FakeScreen(keys=["\x1b"])
        monkeypatch.setattr(app_module.curses, "wrapper", lambda loop: loop(screen))
        monkeypatch.setattr(PickerApp, "_setup", lambda self, stdscr: None)
        monkeypatch.setenv("ESCDELAY", "25")

        assert PickerApp(group).run() is None
        assert group.status is PickerStatus.ABORTED
