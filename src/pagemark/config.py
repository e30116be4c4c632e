"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "PAGEMARK_"


class Settings(BaseModel):
    app_name:       str   = "pagemark"
    db_url:         str   = "sqlite:///pagemark.db"
    image_base:     str   = Field(default="images/", description="Prefix for non-external image sources")
    page_capacity:  float = Field(default=720.0, gt=0,  description="Page height available to content blocks")
    output_dir:     str   = Field(default="dist",       description="Directory for exported HTML + JSON files")
    chars_per_line: int   = Field(default=60,  ge=1,    description="Estimated characters per rendered line")
    line_height:    float = Field(default=24.0, gt=0,   description="Estimated height of one text line")
    block_spacing:  float = Field(default=16.0, ge=0,   description="Vertical gap added after every block")
    image_height:   float = Field(default=240.0, ge=0,  description="Estimated height of an image block")
    debounce_ms:    int   = Field(default=250, ge=0,    description="Delay before a re-pagination request runs")
    log_level:      str   = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then PAGEMARK_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
