"""`sdev tmux`: pick a repository or live session and attach to it."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from sdev.cli.tui.app import PickerApp
from sdev.cli.tui.picker import Picker, PickerGroup
from sdev.config import config
from sdev.core.discovery import SessionCandidate, discover_repositories, discover_sessions, start_ingest
from sdev.core.repo import GitRepo
from sdev.core.session_launcher import Selection, launch

REPOS_TITLE = "repos"
SESSIONS_TITLE = "sessions"


def build_pickers(root: Path, sessions_first: bool = False) -> PickerGroup:
    """Repository and session pickers sharing one query."""
    budget = config.picker.tick_budget_ms
    repos: Picker[GitRepo] = Picker(REPOS_TITLE, lambda repo: repo.relative_path(root), budget)
    sessions: Picker[SessionCandidate] = Picker(SESSIONS_TITLE, lambda session: session.name, budget)
    return PickerGroup([repos, sessions], focused=1 if sessions_first else 0)


def run_tmux_picker(root: Path, cwd: Path, sessions_first: Optional[bool] = None) -> Optional[Selection]:
    """Run the picker and launch the selection. Returns None when the user aborts."""
    if sessions_first is None:
        sessions_first = config.picker.default_mode == SESSIONS_TITLE
    group = build_pickers(root, sessions_first)
    repos, sessions = group.pickers
    start_ingest(REPOS_TITLE, lambda: discover_repositories(root), repos.push)
    start_ingest(SESSIONS_TITLE, discover_sessions, sessions.push)

    selection: Optional[Selection] = PickerApp(group, config.picker.poll_interval_ms).run()
    launch(selection, cwd)
    return selection
