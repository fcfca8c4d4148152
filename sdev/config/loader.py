import logging
import os
import sys
from pathlib import Path
from typing import Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from sdev.config.schema import SdevConfig
from sdev.utils import expand_env_vars

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_CONFIG_PATH = Path("~/.config/sdev/sdev.yml")


def _warn_unknown_keys(model: BaseModel, path: str, config_path: Path) -> None:
    """Recursively warn about unknown keys in a model and its nested models."""
    if hasattr(model, "model_extra") and model.model_extra:
        logger.warning("Unknown keys in %s at %s: %s", path, config_path, list(model.model_extra.keys()))

    for field_name, field_value in model.__dict__.items():
        if isinstance(field_value, BaseModel):
            _warn_unknown_keys(field_value, f"{path}.{field_name}", config_path)


def load_config(path: Path, model_class: Type[T]) -> T:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to the sdev.yml file.
        model_class: The Pydantic model class to use for validation.

    Returns:
        The validated configuration model. Defaults when the file is missing or unreadable.
    """
    if not path.exists():
        return model_class()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read config file %s: %s", path, e)
        return model_class()

    if not isinstance(raw, dict):
        logger.warning("Ignoring config file %s: top level must be a mapping", path)
        return model_class()

    expanded = expand_env_vars(raw)
    model = model_class.model_validate(expanded)
    _warn_unknown_keys(model, "root", path)
    return model


def config_path() -> Path:
    """Resolve the config location (SDEV_CONFIG_PATH wins)."""
    env_path = os.getenv("SDEV_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_global_config(path: Optional[Path] = None) -> SdevConfig:
    """Load the user-level configuration; an invalid file ends the process with exit 1."""
    resolved = path or config_path()
    try:
        return load_config(resolved, SdevConfig)
    except ValidationError as exc:
        logger.error("Invalid config file %s: %s", resolved, exc)
        sys.stderr.write(f"sdev error: invalid config {resolved}: {exc}\n")
        raise SystemExit(1) from exc
