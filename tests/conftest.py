"""Pytest configuration for sdev tests."""

import logging
import os
import subprocess

import pytest

# Keep the developer's own config and .env out of the global config loaded at import
os.environ["SDEV_CONFIG_PATH"] = os.devnull
os.environ["SDEV_ENV_PATH"] = os.devnull
os.environ.pop("TMUX", None)

logging.getLogger("sdev").handlers.clear()


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))


@pytest.fixture
def sdev_config(monkeypatch, tmp_path):
    """The global config object, pointed at a scratch root for one test."""
    from sdev.config import config

    monkeypatch.setattr(config, "root", tmp_path / "src")
    monkeypatch.setattr(config, "default_session_dir", None)
    monkeypatch.setattr(config.git, "host", "github.com")
    monkeypatch.setattr(config.git, "user", "octocat")
    monkeypatch.setattr(config.git, "binary", "git")
    monkeypatch.setattr(config.tmux, "binary", "tmux")
    return config


class FakeTmux:
    """Stands in for the tmux binary behind subprocess.run."""

    def __init__(self, sessions=(), current=None):
        self.sessions = list(sessions)
        self.current = current
        self.calls: list[list[str]] = []

    def __call__(self, argv, cwd=None, capture_output=False, text=False, check=False):
        self.calls.append(list(argv))
        subcommand, args = argv[1], argv[2:]
        stdout, stderr, code = "", "", 0
        if subcommand == "has-session":
            name = args[1].lstrip("=")
            if name not in self.sessions:
                stderr, code = f"can't find session: {name}", 1
        elif subcommand == "new-session":
            self.sessions.append(args[args.index("-s") + 1])
        elif subcommand == "display-message":
            if self.current is None:
                stderr, code = "no current client", 1
            else:
                stdout = f"{self.current}\n"
        elif subcommand == "switch-client":
            self.current = args[1]
        elif subcommand == "list-sessions":
            if not self.sessions:
                stderr, code = "no server running", 1
            else:
                stdout = "".join(f"{name}\n" for name in self.sessions)
        return subprocess.CompletedProcess(argv, code, stdout, stderr)

    def subcommands(self) -> list[str]:
        return [argv[1] for argv in self.calls]


@pytest.fixture
def fake_tmux(monkeypatch, sdev_config):
    """tmux replaced by an in-memory session table."""
    from sdev.core import shell

    fake = FakeTmux()
    monkeypatch.setattr(shell.subprocess, "run", fake)
    return fake
