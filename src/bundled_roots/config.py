"""
Configuration — typed, validated settings for a generator run.

Uses pydantic-settings to:
  - Load from BUNDLED_ROOTS_* environment variables
  - Fall back to a .env file in the working directory
  - Validate types and ranges before any file is read

The command line only carries --output; main() passes it in as an init
argument, which takes priority over the environment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INPUT = Path("certs.pem")
DEFAULT_OUTPUT = Path("root_darwin_arm64.go")
DEFAULT_COMMAND = "bundled-roots-gen"


class GeneratorSettings(BaseSettings):
    """
    Root settings for the generator.

    Load order (highest priority first):
      1. Init arguments (the --output flag)
      2. Environment variables (BUNDLED_ROOTS_OUTPUT_PATH, ...)
      3. .env file
      4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="BUNDLED_ROOTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    input_path: Path = Field(default=DEFAULT_INPUT, description="PEM bundle to read")
    output_path: Path = Field(default=DEFAULT_OUTPUT, description="Go file to write")
    command: str = Field(
        default=DEFAULT_COMMAND,
        min_length=1,
        description="Command named in the generated DO NOT EDIT marker",
    )
    compression_level: int = Field(default=9, ge=1, le=9)
    formatter: Literal["canonical", "gofmt"] = Field(default="canonical")
    gofmt_path: str = Field(default="gofmt")
    verify_round_trip: bool = Field(default=True)
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names in any case."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @field_validator("output_path")
    @classmethod
    def validate_output_path(cls, value: Path) -> Path:
        """The output must name a file, so an empty --output is rejected."""
        if not value.name:
            raise ValueError(f"output_path must name a file, got {str(value)!r}")
        return value
