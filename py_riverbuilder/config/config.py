"""Configuration management."""

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "RIVERBUILDER_"


class Settings(BaseSettings):
    """Run settings pulled from environment variables."""

    # Output
    output_dir: str = Field(default="", description="Directory receiving the output files")
    overwrite: bool = Field(default=False, description="Replace existing output files")
    write_charts: bool = Field(default=True, description="Render the diagnostic charts")
    chart_dpi: int = Field(default=100, ge=10, description="Chart resolution in dots per inch")

    # Generation
    seed: Optional[int] = Field(
        default=None, description="Seed of the smoothed-noise random stream"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def load_settings(env_file: Optional[Path] = None, **overrides) -> Settings:
    """
    Build settings, filling unset variables from an explicit .env file.

    Args:
        env_file: Optional dotenv file; values already in the environment win
        **overrides: Field values taking precedence over the environment

    Returns:
        Resolved settings
    """
    values = {}
    if env_file is not None and Path(env_file).exists():
        for key, value in dotenv_values(env_file).items():
            if key.startswith(ENV_PREFIX) and key not in os.environ and value is not None:
                values[key[len(ENV_PREFIX):].lower()] = value

    values.update({key: value for key, value in overrides.items() if value is not None})
    return Settings(**values)
