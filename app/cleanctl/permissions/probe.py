"""Readability probing by actual access attempts.

Access to consent-gated locations cannot be inferred from mode bits, so
every probe really lists the directory or reads the file. Probing runs in
two phases: a startup pass that leaves folders able to trigger an OS
consent dialog untouched, and an explicit full pass that probes
everything.
"""

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from cleanctl.core.cancel import CancellationToken, is_cancelled
from cleanctl.permissions.models import (
    FolderAccessInfo,
    FolderAccessStatus,
    PermissionCategoryState,
    rollup_status,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AccessProber",
    "FilesystemProber",
    "PermissionProbe",
    "has_full_disk_access",
    "rollup_status",
]


class AccessProber(ABC):
    """Capability that decides whether a path is readable."""

    @abstractmethod
    def probe(self, path: str) -> FolderAccessStatus:
        """Attempt to read a path.

        Args:
            path: Absolute path.

        Returns:
            ACCESSIBLE, DENIED or NOT_EXISTS.
        """


class FilesystemProber(AccessProber):
    """Probes the local filesystem.

    Directories are listed and files are read completely.
    """

    def probe(self, path: str) -> FolderAccessStatus:
        if not os.path.exists(path):
            return FolderAccessStatus.NOT_EXISTS

        try:
            if os.path.isdir(path):
                os.listdir(path)
            else:
                Path(path).read_bytes()
        except FileNotFoundError:
            return FolderAccessStatus.NOT_EXISTS
        except OSError as e:
            logger.debug("Access denied for %s: %s", path, e)
            return FolderAccessStatus.DENIED

        return FolderAccessStatus.ACCESSIBLE


class PermissionProbe:
    """Runs probes for catalog folders and applies the results.

    Probes run on a thread pool. Status fields are only written by the
    calling thread: ``CHECKING`` before a probe is submitted, the final
    status once its result arrives.

    Args:
        prober: Access capability. Defaults to :class:`FilesystemProber`.
        max_workers: Thread pool size.
    """

    def __init__(self, prober: AccessProber | None = None, *, max_workers: int = 4) -> None:
        self._prober = prober or FilesystemProber()
        self._max_workers = max(1, max_workers)

    def check(
        self,
        folders: Iterable[FolderAccessInfo],
        *,
        skip_consent_triggering: bool = False,
        cancel_token: CancellationToken | None = None,
    ) -> int:
        """Probe folders and update their status in place.

        Args:
            folders: Folders to probe.
            skip_consent_triggering: Leave folders that may show an OS
                consent dialog at their current status.
            cancel_token: Checked before each probe starts. Folders whose
                probe did not run get their previous status back.

        Returns:
            Number of folders whose probe completed.
        """
        targets = [
            folder
            for folder in folders
            if not (skip_consent_triggering and folder.can_trigger_consent_dialog)
        ]
        if not targets:
            return 0

        previous = {folder.id: folder.status for folder in targets}
        for folder in targets:
            folder.status = FolderAccessStatus.CHECKING

        completed = 0
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {
                executor.submit(self._probe, folder.expanded_path, cancel_token): folder
                for folder in targets
            }
            for future in as_completed(futures):
                folder = futures[future]
                status = future.result()
                if status is None:
                    folder.status = previous[folder.id]
                    continue
                folder.status = status
                completed += 1

        logger.debug("Probed %d of %d folder(s)", completed, len(targets))
        return completed

    def startup_pass(
        self,
        categories: Iterable[PermissionCategoryState],
        *,
        cancel_token: CancellationToken | None = None,
    ) -> int:
        """Probe every folder that cannot trigger a consent dialog."""
        folders = [folder for category in categories for folder in category.folders]
        return self.check(folders, skip_consent_triggering=True, cancel_token=cancel_token)

    def full_pass(
        self,
        categories: Iterable[PermissionCategoryState],
        *,
        cancel_token: CancellationToken | None = None,
    ) -> int:
        """Probe every folder, including consent-gated ones.

        Only run this on explicit user request: reading a consent-gated
        folder may make the OS prompt the user.
        """
        folders = [folder for category in categories for folder in category.folders]
        return self.check(folders, cancel_token=cancel_token)

    def check_single(self, folder: FolderAccessInfo) -> FolderAccessStatus:
        """Re-probe one folder, e.g. after the user granted access."""
        self.check([folder])
        return folder.status

    def _probe(
        self,
        path: str,
        cancel_token: CancellationToken | None,
    ) -> FolderAccessStatus | None:
        if is_cancelled(cancel_token):
            return None
        return self._prober.probe(path)


def has_full_disk_access(prober: AccessProber | None = None, home: Path | None = None) -> bool:
    """Check whether the process has full disk access.

    Reads the Mail library, or the Safari history when Mail was never set
    up. Both are only readable with full disk access.

    Args:
        prober: Access capability. Defaults to :class:`FilesystemProber`.
        home: Home directory. Defaults to ``Path.home()``.

    Returns:
        True if the probed location is readable.
    """
    active = prober or FilesystemProber()
    base = home if home is not None else Path.home()

    for candidate in (base / "Library" / "Mail", base / "Library" / "Safari" / "History.db"):
        status = active.probe(str(candidate))
        if status != FolderAccessStatus.NOT_EXISTS:
            return status == FolderAccessStatus.ACCESSIBLE

    return False
