from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


ENV_PREFIX = "FPGACHESS_"
# Path of the YAML file read by app factories started without explicit settings
CONFIG_ENV = ENV_PREFIX + "CONFIG"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = "INFO"
    perft_max_depth: int = Field(default=4, ge=0, le=6)

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Load settings from an optional YAML file plus environment overrides.

    Args:
        config_path: Path to a YAML mapping with ``Settings`` fields.

    Returns:
        Settings: Validated settings with defaults applied.

    Raises:
        FileNotFoundError: If ``config_path`` is given and does not exist.
        ValueError: If the merged configuration fails validation.
    """
    raw: Dict[str, Any] = {}
    if config_path is not None:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found at: {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError("Invalid configuration: top level must be a mapping")
        raw.update(loaded)

    for name in Settings.model_fields:
        env_val = os.environ.get(ENV_PREFIX + name.upper())
        if env_val is not None:
            raw[name] = env_val

    try:
        return Settings(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=getattr(logging, settings.log_level))
