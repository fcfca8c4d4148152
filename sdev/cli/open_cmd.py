"""`sdev open pr`: link to GitHub's new pull request form for the current branch."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sdev.core import git
from sdev.core.git import GitError
from sdev.core.repo import InvalidRepoSource, RepoUrl, parse_repo_source

logger = logging.getLogger(__name__)

GITHUB_HOST = "github.com"
UPSTREAM = "upstream"
ORIGIN = "origin"


def _target_remote(cwd: Path) -> tuple[str, str]:
    """(remote name, fetch URL), preferring `upstream` over `origin`."""
    for remote in (UPSTREAM, ORIGIN):
        url = git.remote_url(cwd, remote)
        if url:
            return remote, url
    raise GitError("no upstream or origin remote")


def pull_request_url(cwd: Path, target: Optional[str] = None) -> str:
    """Build the new pull request URL for the branch checked out in `cwd`.

    Raises:
        GitError: detached HEAD, missing remote, or a host/remote combination
            without a known URL scheme.
    """
    branch = git.current_branch(cwd)
    remote, url = _target_remote(cwd)

    try:
        source = parse_repo_source(url)
    except InvalidRepoSource as exc:
        raise GitError(f"cannot parse {remote} remote url {url}") from exc
    if not isinstance(source, RepoUrl):
        raise GitError(f"{remote} remote {url} has no host")

    if source.host != GITHUB_HOST:
        raise GitError(f"unsupported host {source.host} for {remote} remote")
    if remote != ORIGIN:
        raise GitError(f"pull requests against the {remote} remote are not supported")

    prefix = f"{target}..." if target else ""
    logger.debug("Building pull request url for %s on %s", branch, source.path)
    return f"https://{source.host}/{source.path}/pull/{prefix}{branch}"
