"""XDG-compliant path management for cleanctl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage.

XDG defaults:
- Config: ~/.config/cleanctl/
- State: ~/.local/state/cleanctl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "cleanctl"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/cleanctl/ (or XDG_CONFIG_HOME/cleanctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data holds the deletion history, which should persist between
    runs but is not configuration.

    Returns:
        Path to ~/.local/state/cleanctl/ (or XDG_STATE_HOME/cleanctl/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the main configuration file path.

    Returns:
        Path to ~/.config/cleanctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_history_path() -> Path:
    """Get the history file path.

    Returns:
        Path to ~/.local/state/cleanctl/history.jsonl.
    """
    return get_state_dir() / "history.jsonl"


def expand_home(path: str, home: Path | None = None) -> str:
    """Expand a leading ``~`` to the home directory.

    Only a bare ``~`` or a ``~/`` prefix is expanded; ``~user`` forms are
    returned unchanged.

    Args:
        path: Path string that may start with ``~``.
        home: Home directory to substitute. Defaults to ``Path.home()``.

    Returns:
        Path string with the home token expanded.
    """
    if path == "~" or path.startswith("~/"):
        base = str(home if home is not None else Path.home())
        return base + path[1:]
    return path


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Returns:
        Path to the state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")
