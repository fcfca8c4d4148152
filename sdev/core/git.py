"""git boundary: cloning and the few repository queries sdev needs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sdev.config import config
from sdev.core.shell import ShellError, command

logger = logging.getLogger(__name__)


class GitError(Exception):
    """A git query did not produce the information sdev needs."""


def clone(url: str, path: Path) -> None:
    """Clone `url` into `path`, echoing the command to the user.

    A non-zero exit is only logged; callers check the checkout on disk.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ShellError(f"mkdir -p {path.parent}", exc) from exc
    status = command(config.git.binary, "clone", url, path).run(echo=True)
    if status != 0:
        logger.warning("git clone %s exited with %d", url, status)


def _git_output(cwd: Path, *args: str) -> Optional[str]:
    result = command(config.git.binary, *args, cwd=cwd).output()
    if result.returncode != 0:
        logger.debug("git %s failed in %s: %s", " ".join(args), cwd, result.stderr.strip())
        return None
    return result.stdout.strip()


def current_branch(cwd: Path) -> str:
    """Short name of the checked-out branch."""
    branch = _git_output(cwd, "symbolic-ref", "--short", "HEAD")
    if not branch:
        raise GitError("detached HEAD")
    return branch


def remote_url(cwd: Path, remote: str) -> Optional[str]:
    """Fetch URL of `remote`, or None when it is not configured."""
    return _git_output(cwd, "remote", "get-url", remote)
