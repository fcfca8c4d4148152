"""Defaults for the external binaries sdev drives."""

from sdev.runtime.binaries import resolve_git_binary, resolve_tmux_binary

__all__ = ["resolve_tmux_binary", "resolve_git_binary"]
