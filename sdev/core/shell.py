"""External command execution for the tools sdev drives (git, tmux).

Every spawn goes through `Command` so that launch failures surface as
`ShellError` with the printable command line attached.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn, Optional

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)

_console = Console(highlight=False)


class ShellError(Exception):
    """An external command could not be launched or its I/O failed."""

    def __init__(self, command: str, source: OSError) -> None:
        super().__init__(f'error running "{command}": {source}')
        self.command = command
        self.source = source


@dataclass
class Command:
    """A printable argv, run without a shell."""

    argv: list[str]
    cwd: Optional[Path] = field(default=None)

    def __str__(self) -> str:
        return shlex.join(self.argv)

    def echo(self) -> None:
        """Show the command to the user before running it."""
        _console.print(f"$ {escape(str(self))}\n", style="grey50")

    def run(self, echo: bool = False) -> int:
        """Run with inherited stdio and return the exit status."""
        if echo:
            self.echo()
        logger.debug("Running %s", self)
        try:
            result = subprocess.run(self.argv, cwd=self.cwd, check=False)
        except OSError as exc:
            raise ShellError(str(self), exc) from exc
        return result.returncode

    def output(self, echo: bool = False) -> subprocess.CompletedProcess[str]:
        """Run with captured stdout/stderr (text)."""
        if echo:
            self.echo()
        logger.debug("Capturing %s", self)
        try:
            return subprocess.run(self.argv, cwd=self.cwd, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise ShellError(str(self), exc) from exc

    def exec(self) -> NoReturn:
        """Replace the current process with this command."""
        logger.info("Exec %s", self)
        if self.cwd is not None:
            os.chdir(self.cwd)
        try:
            os.execvp(self.argv[0], self.argv)
        except OSError as exc:
            raise ShellError(str(self), exc) from exc


def command(*argv: object, cwd: Optional[Path] = None) -> Command:
    """Build a Command, stringifying path-like arguments."""
    return Command([str(arg) for arg in argv], cwd=cwd)
