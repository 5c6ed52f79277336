"""Generator settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pywise.errors import ConfigError

ALGORITHMS = ("pairwise", "legacy", "combinatorial")
OUTPUT_FORMATS = ("table", "json", "csv")


class GeneratorSettings(BaseSettings):
    """Settings for pywise generation runs."""

    model_config = SettingsConfigDict(
        env_prefix="PYWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    algorithm: str = "pairwise"
    jump: int = Field(default=3, ge=1)
    seed: int | None = None
    limit: int | None = Field(default=None, ge=1)
    output_format: str = "table"
    log_level: str = "WARNING"
    verbose: bool = False

    @field_validator("algorithm", mode="before")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        v = str(v).lower()
        if v not in ALGORITHMS:
            raise ValueError(f"Invalid algorithm: {v}. Valid: {list(ALGORITHMS)}")
        return v

    @field_validator("output_format", mode="before")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        v = str(v).lower()
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output format: {v}. Valid: {list(OUTPUT_FORMATS)}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = str(v).upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return v


def load_settings(config_path: str | Path | None = None) -> GeneratorSettings:
    """Load settings from a YAML file and the environment.

    Priority: env vars > config file > defaults

    Raises:
        ConfigError: If the file is not valid YAML or a value fails validation.
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            try:
                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Could not parse {config_path}: {e}", cause=e) from e
            if not isinstance(config_data, dict):
                raise ConfigError(f"{config_path} must contain a mapping at the top level")

    # Environment variables win over the file.
    for key in list(config_data):
        if f"PYWISE_{key.upper()}" in os.environ:
            config_data.pop(key)

    try:
        return GeneratorSettings(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}", cause=e) from e
