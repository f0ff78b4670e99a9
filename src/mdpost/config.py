"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:    str = "mdpost"
    content_dir: str = Field(default="_posts", description="Default directory scanned for posts")
    output_dir:  str = Field(default="dist",   description="Directory for the exported index.json")
    extensions:  list[str] = Field(default=[".md", ".markdown", ".mdx"], description="Post file suffixes")
    workers:     int = Field(default=4, ge=1, description="Parallel loader tasks; 1 loads inline")
    excerpt_separator: str = Field(default="\n\n", description="Marker ending the post excerpt")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    strict:      bool = Field(default=False, description="Treat body validation errors as failures")
    log_level:   str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @field_validator("extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: Any) -> Any:
        """Accept a comma-separated string (as set from the environment)."""
        if isinstance(value, str):
            value = [v.strip() for v in value.split(",") if v.strip()]
        if isinstance(value, list):
            return [v if v.startswith(".") else f".{v}" for v in value]
        return value

    @field_validator("parser_config")
    @classmethod
    def _check_preset(cls, value: str) -> str:
        try:
            MarkdownIt(value)
        except KeyError as e:
            raise ValueError(f"Unknown markdown-it preset {value!r}") from e
        return value


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDPOST_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDPOST_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
