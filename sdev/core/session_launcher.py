"""Turn a picker selection into an attached tmux session."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from sdev.config import config
from sdev.core.convergence import Resource, process
from sdev.core.discovery import SessionCandidate
from sdev.core.repo import GitRepo
from sdev.core.resources import SessionAttached

logger = logging.getLogger(__name__)

Selection = Union[GitRepo, SessionCandidate]


def resource_for(selection: Selection, cwd: Path) -> Resource:
    if isinstance(selection, GitRepo):
        return SessionAttached(selection.name, selection.path)
    return SessionAttached(selection.name, config.default_session_dir or cwd)


def launch(selection: Optional[Selection], cwd: Path) -> None:
    """Converge on a session for `selection`; nothing happens when it is None."""
    if selection is None:
        logger.debug("No selection, nothing to launch")
        return
    process(resource_for(selection, cwd))
