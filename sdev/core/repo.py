"""Git repositories on disk and the user-facing ways of naming one."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Union
from urllib.parse import urlparse

from sdev.constants import GIT_METADATA_DIR

# user@host:path (scp-like ssh syntax)
_SCP_LIKE = re.compile(r"^(?:[^@/:]+@)?(?P<host>[^/:]+):(?P<path>.+)$")
_URL_SCHEMES = ("http", "https", "ssh", "git", "git+ssh")


class InvalidRepoSource(ValueError):
    def __init__(self, text: str) -> None:
        super().__init__(f"invalid repo: {text}")
        self.text = text


def is_working_copy(path: Path) -> bool:
    """True when `path` holds a git metadata directory."""
    return (path / GIT_METADATA_DIR).is_dir()


@dataclass(frozen=True)
class GitRepo:
    """A working copy found on disk."""

    name: str
    path: Path

    @classmethod
    def try_from_path(cls, path: Path) -> Optional["GitRepo"]:
        if not is_working_copy(path):
            return None
        return cls(name=path.name, path=path)

    def relative_path(self, root: Path) -> str:
        """Path below `root`, used as the picker's search text."""
        try:
            return str(self.path.relative_to(root))
        except ValueError:
            return str(self.path)


@dataclass(frozen=True)
class RepoName:
    """`friday`: a repository owned by the configured user."""

    name: str


@dataclass(frozen=True)
class RepoPath:
    """`rails/rails`: owner/repository on the configured host."""

    path: str


@dataclass(frozen=True)
class RepoUrl:
    """A full clone URL; `path` is the host-relative location without `.git`."""

    url: str
    host: str
    path: PurePosixPath


GitRepoSource = Union[RepoName, RepoPath, RepoUrl]


def _normal_parts(text: str, raw: str) -> tuple[str, ...]:
    parts = tuple(text.split("/"))
    if not parts or any(part in ("", ".", "..") for part in parts):
        raise InvalidRepoSource(raw)
    return parts


def _strip_git_suffix(path: str) -> str:
    return path[: -len(".git")] if path.endswith(".git") else path


def parse_repo_source(text: str) -> GitRepoSource:
    """Parse a clone argument into a name, short path or URL.

    Raises:
        InvalidRepoSource: absolute paths, traversal, or URLs without host/path.
    """
    raw = text.strip()
    if not raw:
        raise InvalidRepoSource(text)

    if "://" in raw:
        parsed = urlparse(raw)
        if parsed.scheme not in _URL_SCHEMES or not parsed.hostname:
            raise InvalidRepoSource(text)
        path = _strip_git_suffix(parsed.path.lstrip("/").rstrip("/"))
        return RepoUrl(url=raw, host=parsed.hostname, path=PurePosixPath(*_normal_parts(path, text)))

    scp = _SCP_LIKE.match(raw)
    if scp and not raw.startswith("/"):
        path = _strip_git_suffix(scp.group("path").rstrip("/"))
        if path.startswith("/"):
            path = path[1:]
        return RepoUrl(url=raw, host=scp.group("host"), path=PurePosixPath(*_normal_parts(path, text)))

    if raw.startswith("/") or raw.startswith("~"):
        raise InvalidRepoSource(text)
    parts = _normal_parts(raw, text)
    if len(parts) == 1:
        return RepoName(parts[0])
    return RepoPath("/".join(parts))


def clone_url_and_path(source: GitRepoSource, root: Path, host: str, user: str) -> tuple[str, Path]:
    """Clone URL and standardized destination below `root/<host>/`."""
    if isinstance(source, RepoName):
        return f"git@{host}:{user}/{source.name}.git", root / host / user / source.name
    if isinstance(source, RepoPath):
        return f"git@{host}:{source.path}.git", root / host / source.path
    return source.url, root / source.host / Path(*source.path.parts)
