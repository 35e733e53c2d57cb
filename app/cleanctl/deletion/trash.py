"""Trash primitives.

Moving to the trash is the only deletion primitive: every removal stays
recoverable by the user.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from send2trash import send2trash

from cleanctl.errors import CleanctlError
from cleanctl.safety.validator import get_size

logger = logging.getLogger(__name__)

# Trash locations relative to the home directory (macOS, then freedesktop).
TRASH_DIRS: tuple[str, ...] = (".Trash", ".local/share/Trash")


class TrashService(ABC):
    """Host trash service."""

    @abstractmethod
    def trash(self, path: str) -> None:
        """Move a path to the trash.

        Args:
            path: Absolute path to move.

        Raises:
            OSError: If the move fails.
        """


class Send2TrashService(TrashService):
    """Trash service backed by the ``send2trash`` library."""

    def trash(self, path: str) -> None:
        send2trash(path)


def trash_size(home: Path | None = None) -> int:
    """Get the total size of the user's trash.

    Args:
        home: Home directory. Defaults to ``Path.home()``.

    Returns:
        Size in bytes of all existing trash directories (0 if none).
    """
    base = home if home is not None else Path.home()
    total = 0
    for sub in TRASH_DIRS:
        trash_dir = str(base / sub)
        if not os.path.isdir(trash_dir):
            continue
        try:
            total += get_size(trash_dir)
        except CleanctlError as e:
            logger.warning("Cannot measure trash %s: %s", trash_dir, e)
    return total
