"""Unit tests for XDG path management.

Tests for the paths module that provides XDG-compliant directory paths.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from cleanctl.core.paths import (
    APP_NAME,
    ensure_config_dir,
    ensure_state_dir,
    expand_home,
    get_config_dir,
    get_config_path,
    get_history_path,
    get_state_dir,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_config_dir()
            expected = Path.home() / ".config" / APP_NAME

        assert result == expected

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME


class TestGetStateDir:
    """Tests for get_state_dir function."""

    def test_default_state_dir(self) -> None:
        """get_state_dir returns default path when XDG_STATE_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_state_dir()
            expected = Path.home() / ".local" / "state" / APP_NAME

        assert result == expected

    def test_respects_xdg_state_home(self, tmp_path: Path) -> None:
        """get_state_dir respects XDG_STATE_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}):
            result = get_state_dir()

        assert result == tmp_path / APP_NAME


class TestFilePaths:
    """Tests for file path helpers."""

    def test_config_path(self, tmp_path: Path) -> None:
        """Config file lives in the config directory."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_path() == tmp_path / APP_NAME / "config.toml"

    def test_history_path(self, tmp_path: Path) -> None:
        """History file lives in the state directory."""
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}):
            assert get_history_path() == tmp_path / APP_NAME / "history.jsonl"


class TestExpandHome:
    """Tests for expand_home function."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("~", "/Users/me"),
            ("~/Library/Caches", "/Users/me/Library/Caches"),
            ("/Library/Caches", "/Library/Caches"),
            ("~other/Library", "~other/Library"),
            ("relative/~", "relative/~"),
        ],
    )
    def test_expand_home(self, path: str, expected: str) -> None:
        """Only a bare tilde or a tilde-slash prefix is expanded."""
        assert expand_home(path, Path("/Users/me")) == expected


class TestEnsureDirs:
    """Tests for directory creation helpers."""

    def test_ensure_config_dir_creates(self, tmp_path: Path) -> None:
        """ensure_config_dir creates the directory."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = ensure_config_dir()

        assert result == tmp_path / APP_NAME
        assert result.is_dir()

    def test_ensure_state_dir_creates(self, tmp_path: Path) -> None:
        """ensure_state_dir creates the directory."""
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}):
            result = ensure_state_dir()

        assert result.is_dir()

    def test_ensure_state_dir_permission_error(self, tmp_path: Path) -> None:
        """ensure_state_dir raises RuntimeError on permission errors."""
        with (
            patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}),
            patch.object(Path, "mkdir", side_effect=PermissionError("denied")),
            pytest.raises(RuntimeError, match="Permission denied"),
        ):
            ensure_state_dir()
