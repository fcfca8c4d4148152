"""sdev logging configuration.

Logs are written to a rotating file (default: `~/.sdev/logs/sdev.log`), never to
the terminal: the picker owns the screen while it runs and tmux may take it over
right after.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAX_LOG_BYTES = 1024 * 1024
LOG_BACKUPS = 3


def setup_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """Configure sdev logging.

    Args:
        level: Optional override for `SDEV_LOG_LEVEL` and the configured level.
        log_file: Optional override for the configured log file.
    """
    from sdev.config import config

    resolved_level = (level or os.getenv("SDEV_LOG_LEVEL") or config.logging.level).upper()
    path = (log_file or config.logging.file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("sdev")
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.setLevel(resolved_level)
    root.propagate = False
