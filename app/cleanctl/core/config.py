"""Cleaner configuration and settings.

This module provides the configuration model and I/O functions for
cleanctl. Configuration is stored in ~/.config/cleanctl/config.toml; a
missing file means defaults.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cleanctl.core.paths import get_config_path
from cleanctl.errors import CleanctlError


class CleanerConfig(BaseModel):
    """Configuration for scans and deletion.

    Attributes:
        max_workers: Thread pool size for scans and probes.
        include_system_paths: Also search root-owned leftover locations.
        application_dirs: Folders searched for installed ``.app`` bundles.
        dry_run: Never move anything to the trash.
    """

    model_config = ConfigDict(extra="forbid")

    max_workers: Annotated[
        int,
        Field(ge=1, le=32, description="Worker threads for read-only scans (1-32)"),
    ] = 4
    include_system_paths: Annotated[
        bool,
        Field(description="Search /Library for leftovers as well"),
    ] = False
    application_dirs: Annotated[
        list[str],
        Field(description="Folders containing installed applications"),
    ] = Field(default_factory=lambda: ["/Applications", "~/Applications"])
    dry_run: Annotated[
        bool,
        Field(description="Report deletions without moving anything to the trash"),
    ] = False


class ConfigError(CleanctlError):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> CleanerConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated CleanerConfig. Defaults when the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or does not match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return CleanerConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return CleanerConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: CleanerConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file first and moved into place
    with os.replace().

    Args:
        config: The CleanerConfig to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
