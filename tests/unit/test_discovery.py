"""Unit tests for candidate discovery and background ingestion."""

from __future__ import annotations

import logging

from sdev.core.discovery import SessionCandidate, discover_repositories, discover_sessions, start_ingest
from sdev.core.repo import GitRepo
from sdev.core.shell import ShellError


def make_checkout(path):
    (path / ".git").mkdir(parents=True)
    return path


def test_discovers_checkouts_without_descending_into_them(tmp_path) -> None:
    rails = make_checkout(tmp_path / "github.com" / "rails" / "rails")
    sdev = make_checkout(tmp_path / "github.com" / "skipkayhil" / "sdev")
    make_checkout(sdev / "vendor" / "nested")
    (tmp_path / "github.com" / "empty").mkdir()

    repos = list(discover_repositories(tmp_path))

    assert repos == [GitRepo(name="rails", path=rails), GitRepo(name="sdev", path=sdev)]


def test_git_metadata_directories_are_not_walked(tmp_path) -> None:
    make_checkout(tmp_path / ".git" / "modules" / "sub")
    app = make_checkout(tmp_path / "app")

    assert list(discover_repositories(tmp_path)) == [GitRepo(name="app", path=app)]


def test_root_without_checkouts_yields_nothing(tmp_path) -> None:
    (tmp_path / "notes").mkdir()
    assert list(discover_repositories(tmp_path)) == []


def test_missing_root_yields_nothing(tmp_path) -> None:
    assert list(discover_repositories(tmp_path / "missing")) == []


def test_discover_sessions_lists_live_sessions(fake_tmux) -> None:
    fake_tmux.sessions.extend(["main", "sdev"])

    assert list(discover_sessions()) == [SessionCandidate("main"), SessionCandidate("sdev")]


def test_discover_sessions_without_server(fake_tmux) -> None:
    assert list(discover_sessions()) == []


def test_start_ingest_pushes_every_item(tmp_path) -> None:
    make_checkout(tmp_path / "a")
    make_checkout(tmp_path / "b")
    pushed: list[GitRepo] = []

    thread = start_ingest("repos", lambda: discover_repositories(tmp_path), pushed.append)
    thread.join(timeout=1)

    assert thread.daemon is True
    assert [repo.name for repo in pushed] == ["a", "b"]


def test_start_ingest_logs_producer_failure(caplog) -> None:
    def producer():
        yield SessionCandidate("main")
        raise ShellError("tmux list-sessions", FileNotFoundError(2, "No such file or directory"))

    pushed: list[SessionCandidate] = []
    logger = logging.getLogger("sdev.core.discovery")
    logger.addHandler(caplog.handler)
    try:
        thread = start_ingest("sessions", producer, pushed.append)
        thread.join(timeout=1)
    finally:
        logger.removeHandler(caplog.handler)

    assert pushed == [SessionCandidate("main")]
    assert any("Ingest sessions failed after 1 items" in record.getMessage() for record in caplog.records)
