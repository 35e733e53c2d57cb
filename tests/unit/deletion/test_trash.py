"""Unit tests for trash primitives."""

from pathlib import Path
from unittest.mock import patch

from cleanctl.deletion.trash import Send2TrashService, trash_size


class TestSend2TrashService:
    """Tests for Send2TrashService."""

    def test_delegates_to_send2trash(self) -> None:
        """The path is handed to send2trash unchanged."""
        with patch("cleanctl.deletion.trash.send2trash") as mock_send:
            Send2TrashService().trash("/Users/me/Library/Caches/a")
        mock_send.assert_called_once_with("/Users/me/Library/Caches/a")


class TestTrashSize:
    """Tests for trash_size."""

    def test_no_trash(self, tmp_path: Path) -> None:
        """Without a trash directory the size is zero."""
        assert trash_size(tmp_path) == 0

    def test_sums_trash_dirs(self, tmp_path: Path) -> None:
        """Both trash locations are measured."""
        mac_trash = tmp_path / ".Trash"
        mac_trash.mkdir()
        (mac_trash / "old.zip").write_bytes(b"x" * 100)
        xdg_trash = tmp_path / ".local" / "share" / "Trash" / "files"
        xdg_trash.mkdir(parents=True)
        (xdg_trash / "note.txt").write_bytes(b"x" * 20)

        assert trash_size(tmp_path) == 120
