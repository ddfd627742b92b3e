"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "PAGEMIGRATE_"


class Settings(BaseModel):
    app_name:     str = "pagemigrate"
    db_url:       str = "sqlite:///pagemigrate.db"
    max_versions: int = Field(default=10, ge=0, description="Max stored versions per file; 0 disables pruning")
    log_level:    str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$", description="stdlib logging level")
    default_cover_position: float = Field(default=50, ge=0, le=100, description="Cover image focus when none is given")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")
    return data


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then PAGEMIGRATE_<FIELD> env vars, then non-None CLI overrides."""
    path = Path(CONFIG_FILE)
    data = _read_config_file(path) if path.exists() else {}

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
