"""Concrete convergence goals for git checkouts and tmux sessions."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from sdev.core import git, tmux_bridge
from sdev.core.convergence import Resource
from sdev.core.repo import is_working_copy


class RepositoryCloned(Resource):
    """A working copy of `url` exists at `path`."""

    def __init__(self, url: str, path: Path) -> None:
        self.url = url
        self.path = path

    def is_met(self) -> bool:
        return is_working_copy(self.path)

    def meet(self) -> None:
        git.clone(self.url, self.path)

    def describe(self) -> str:
        return f"clone of {self.url} at {self.path}"


class SessionExists(Resource):
    """A tmux session named `name` exists (created detached at `path`)."""

    def __init__(self, name: str, path: Path) -> None:
        self.name = tmux_bridge.sanitize_session_name(name)
        self.path = path

    def is_met(self) -> bool:
        return tmux_bridge.session_exists(self.name)

    def meet(self) -> None:
        tmux_bridge.create_session(self.name, self.path)

    def describe(self) -> str:
        return f"tmux session {self.name}"


class SessionAttached(Resource):
    """The current client is attached to session `name`."""

    def __init__(self, name: str, path: Path) -> None:
        self.name = tmux_bridge.sanitize_session_name(name)
        self.path = path

    def is_met(self) -> bool:
        # Outside tmux there is no active session to ask about
        if not tmux_bridge.in_tmux():
            return False
        return tmux_bridge.current_session_name() == self.name

    def meet(self) -> None:
        tmux_bridge.attach_or_switch(self.name)

    def soft_requirements(self) -> Sequence[Resource]:
        return (SessionExists(self.name, self.path),)

    def describe(self) -> str:
        return f"attachment to tmux session {self.name}"
