"""tmux bridge for sdev - session queries and commands.

All functions are stateless and read the tmux binary from sdev.config at call time.
Session names passed in are expected to be sanitized already (see `sanitize_session_name`).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from sdev.config import config
from sdev.constants import TMUX_CMD_ATTACH, TMUX_CMD_SWITCH, TMUX_ENV_VAR, TMUX_SEPARATOR_CHARS
from sdev.core.shell import command

logger = logging.getLogger(__name__)


def sanitize_session_name(raw: str) -> str:
    """Replace characters tmux treats as target separators with underscores.

    >>> sanitize_session_name("feature:x.y")
    'feature_x_y'
    """
    return "".join("_" if char in TMUX_SEPARATOR_CHARS else char for char in raw)


def in_tmux() -> bool:
    """True when this process runs inside a tmux client."""
    return TMUX_ENV_VAR in os.environ


def session_exists(name: str) -> bool:
    """Check if a tmux session with exactly this name exists.

    The `=` prefix disables tmux's prefix matching on targets.
    """
    # output() rather than run() so tmux's "can't find session" stays off the terminal
    result = command(config.tmux.binary, "has-session", "-t", f"={name}").output()
    if result.returncode != 0:
        logger.debug("Session %s does not exist: %s", name, result.stderr.strip())
        return False
    logger.debug("Session %s exists", name)
    return True


def create_session(name: str, working_dir: Path) -> None:
    """Create a detached tmux session rooted at `working_dir`."""
    result = command(config.tmux.binary, "new-session", "-d", "-s", name, "-c", working_dir).output()
    if result.returncode != 0:
        logger.warning(
            "tmux new-session for %s exited with %d: %s", name, result.returncode, result.stderr.strip()
        )


def current_session_name() -> Optional[str]:
    """Name of the session the current client is attached to, if any."""
    result = command(config.tmux.binary, "display-message", "-p", "#S").output()
    if result.returncode != 0:
        logger.debug("display-message failed: %s", result.stderr.strip())
        return None
    name = result.stdout.strip()
    return name or None


def attach_or_switch(name: str) -> None:
    """Attach to `name`, switching the client when already inside tmux.

    Outside tmux the current process is replaced by `tmux attach-session`.
    """
    if in_tmux():
        command(config.tmux.binary, TMUX_CMD_SWITCH, "-t", name).run()
        return
    command(config.tmux.binary, TMUX_CMD_ATTACH, "-t", name).exec()


def list_sessions() -> List[str]:
    """Names of all live sessions; empty when no tmux server is running."""
    result = command(config.tmux.binary, "list-sessions", "-F", "#{session_name}").output()
    if result.returncode != 0:
        logger.debug("list-sessions failed: %s", result.stderr.strip())
        return []
    return [line for line in result.stdout.splitlines() if line]
