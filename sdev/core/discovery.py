"""Candidate producers for the picker.

Producers are plain generators; `start_ingest` drains one on a daemon thread
and pushes every item into a picker's injector as it is found.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, TypeVar

from sdev.core import tmux_bridge
from sdev.constants import GIT_METADATA_DIR
from sdev.core.repo import GitRepo
from sdev.core.shell import ShellError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SessionCandidate:
    """A live tmux session offered by the session picker."""

    name: str


def discover_repositories(root: Path) -> Iterator[GitRepo]:
    """Yield every working copy below `root`.

    The walk does not descend into a working copy once found, so nested
    checkouts (submodules, vendored repos) are not listed separately.
    """

    def _on_error(error: OSError) -> None:
        logger.debug("Skipping unreadable directory %s: %s", error.filename, error)

    for dirpath, dirnames, _filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        kept: list[str] = []
        for dirname in dirnames:
            if dirname == GIT_METADATA_DIR:
                continue
            repo = GitRepo.try_from_path(Path(dirpath) / dirname)
            if repo is not None:
                yield repo
            else:
                kept.append(dirname)
        dirnames[:] = kept


def discover_sessions() -> Iterator[SessionCandidate]:
    """Yield the live tmux sessions."""
    for name in tmux_bridge.list_sessions():
        yield SessionCandidate(name)


def _ingest(name: str, producer: Callable[[], Iterable[T]], push: Callable[[T], None]) -> None:
    count = 0
    try:
        for item in producer():
            push(item)
            count += 1
    except (OSError, ShellError):
        logger.exception("Ingest %s failed after %d items", name, count)
        return
    logger.info("Ingest %s finished: %d items", name, count)


def start_ingest(name: str, producer: Callable[[], Iterable[T]], push: Callable[[T], None]) -> threading.Thread:
    """Drain `producer` into `push` on a daemon thread and return the thread."""
    logger.info("Ingest %s started", name)
    thread = threading.Thread(target=_ingest, args=(name, producer, push), name=f"sdev-ingest-{name}", daemon=True)
    thread.start()
    return thread
