"""Global configuration management.

Config is loaded at module import time and available globally via:
    from sdev.config import config
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from sdev.config.loader import config_path, load_config, load_global_config
from sdev.config.schema import GitConfig, LoggingConfig, PickerConfig, SdevConfig, TmuxConfig

# Load .env (allow override for tests)
_env_path = os.getenv("SDEV_ENV_PATH")
_dotenv_path = Path(_env_path).expanduser() if _env_path else Path("~/.config/sdev/.env").expanduser()
load_dotenv(_dotenv_path)

config: SdevConfig = load_global_config()

__all__ = [
    "config",
    "config_path",
    "load_config",
    "load_global_config",
    "GitConfig",
    "LoggingConfig",
    "PickerConfig",
    "SdevConfig",
    "TmuxConfig",
]
