"""sdev: clone repositories into a standard layout and jump between tmux sessions."""

from __future__ import annotations

import argparse
import curses
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from sdev import __version__
from sdev.cli.open_cmd import pull_request_url
from sdev.cli.tmux_cmd import run_tmux_picker
from sdev.config import config
from sdev.core.convergence import ConvergenceError, process
from sdev.core.git import GitError
from sdev.core.repo import clone_url_and_path, parse_repo_source
from sdev.core.resources import RepositoryCloned
from sdev.core.shell import ShellError
from sdev.logging_config import setup_logging

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sdev", description=__doc__)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override the configured log level",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    clone = commands.add_parser("clone", help="Clone a git repository into a standardized path")
    clone.add_argument("repo", help="name, owner/name, or clone URL")

    tmux = commands.add_parser(
        "tmux", aliases=["t"], help="Fuzzy attach to a repository's tmux session (creating it if necessary)"
    )
    tmux.add_argument("--sessions", action="store_true", default=None, help="Start focused on live sessions")

    open_parser = commands.add_parser("open", aliases=["o"], help="Open a link for the current repository")
    links = open_parser.add_subparsers(dest="link", required=True)
    pr = links.add_parser("pr", help="Open the New Pull Request form for the current branch")
    pr.add_argument("target", nargs="?", help="Base branch to compare against")
    return parser


def _clone(text: str) -> None:
    source = parse_repo_source(text)
    url, path = clone_url_and_path(source, config.root, config.git.host, config.git.user)
    process(RepositoryCloned(url, path))


def _main_impl(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    logger.debug("sdev %s: %s", __version__, args.command)

    try:
        if args.command == "clone":
            _clone(args.repo)
        elif args.command in ("tmux", "t"):
            run_tmux_picker(config.root, Path(os.getcwd()), args.sessions)
        elif args.command in ("open", "o"):
            print(pull_request_url(Path(os.getcwd()), args.target))
    except (ShellError, ConvergenceError, GitError, ValueError, curses.error) as exc:
        logger.error("sdev %s failed: %s", args.command, exc)
        sys.stderr.write(f"sdev error: {exc}\n")
        sys.exit(1)


def main(argv: Optional[list[str]] = None) -> None:
    try:
        _main_impl(argv)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
