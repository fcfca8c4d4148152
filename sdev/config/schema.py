import getpass
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sdev.constants import DEFAULT_POLL_INTERVAL_MS, DEFAULT_TICK_BUDGET_MS
from sdev.runtime.binaries import resolve_git_binary, resolve_tmux_binary


def _default_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "git"


class GitConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    host: str = "github.com"
    user: str = Field(default_factory=_default_user)
    binary: str = Field(default_factory=resolve_git_binary)


class PickerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    tick_budget_ms: int = Field(default=DEFAULT_TICK_BUDGET_MS, ge=1, le=1000)
    poll_interval_ms: int = Field(default=DEFAULT_POLL_INTERVAL_MS, ge=1, le=1000)
    default_mode: Literal["repos", "sessions"] = "repos"


class TmuxConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    binary: str = Field(default_factory=resolve_tmux_binary)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="allow", validate_default=True)
    level: str = "WARNING"
    file: Path = Path("~/.sdev/logs/sdev.log")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("file")
    @classmethod
    def expand_file(cls, v: Path) -> Path:
        return v.expanduser()


class SdevConfig(BaseModel):
    model_config = ConfigDict(extra="allow", validate_default=True)
    root: Path = Path("~/src")
    git: GitConfig = Field(default_factory=GitConfig)
    picker: PickerConfig = Field(default_factory=PickerConfig)
    tmux: TmuxConfig = Field(default_factory=TmuxConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    # Optional explicit path for the session picker's fallback working dir
    default_session_dir: Optional[Path] = None

    @field_validator("root", "default_session_dir")
    @classmethod
    def expand_paths(cls, v: Optional[Path]) -> Optional[Path]:
        if v is None:
            return v
        return v.expanduser()
