"""Runtime binary resolution policy.

The defaults here are used when the config file does not name a binary.
"""

from __future__ import annotations

import os
import shutil

_TMUX_BINARY = "tmux"
_GIT_BINARY = "git"


def _resolve(name: str, env_var: str) -> str:
    override = os.getenv(env_var)
    if override:
        return override
    return shutil.which(name) or name


def resolve_tmux_binary() -> str:
    """Resolve tmux binary (SDEV_TMUX_BINARY overrides PATH lookup)."""
    return _resolve(_TMUX_BINARY, "SDEV_TMUX_BINARY")


def resolve_git_binary() -> str:
    """Resolve git binary (SDEV_GIT_BINARY overrides PATH lookup)."""
    return _resolve(_GIT_BINARY, "SDEV_GIT_BINARY")
