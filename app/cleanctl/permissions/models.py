"""Permission probe domain models.

This module defines the folder access catalog entries, their status
values, and the per-category state shown by the permissions surface.
"""

import os
import uuid
from dataclasses import dataclass, field
from enum import Enum


class FolderAccessStatus(str, Enum):
    """Readability of a folder or file as observed by an access attempt.

    Attributes:
        UNCHECKED: No probe has touched the entry yet.
        CHECKING: A probe is in progress.
        ACCESSIBLE: The read attempt succeeded.
        DENIED: The entry exists but the read attempt failed.
        NOT_EXISTS: The entry does not exist.
    """

    UNCHECKED = "unchecked"
    CHECKING = "checking"
    ACCESSIBLE = "accessible"
    DENIED = "denied"
    NOT_EXISTS = "not_exists"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS: dict[FolderAccessStatus, str] = {
    FolderAccessStatus.UNCHECKED: "Not checked",
    FolderAccessStatus.CHECKING: "Checking...",
    FolderAccessStatus.ACCESSIBLE: "Accessible",
    FolderAccessStatus.DENIED: "Denied",
    FolderAccessStatus.NOT_EXISTS: "Not found",
}


def rollup_status(folders: list["FolderAccessInfo"]) -> FolderAccessStatus:
    """Aggregate folder statuses into one status.

    Folders that do not exist are ignored. An in-progress probe pre-empts
    any other conclusion; otherwise the rollup is accessible only when
    every remaining folder is accessible.

    Args:
        folders: Folders to aggregate.

    Returns:
        NOT_EXISTS when no folder exists, else CHECKING, ACCESSIBLE or DENIED.
    """
    statuses = [f.status for f in folders if f.status != FolderAccessStatus.NOT_EXISTS]
    if not statuses:
        return FolderAccessStatus.NOT_EXISTS
    if FolderAccessStatus.CHECKING in statuses:
        return FolderAccessStatus.CHECKING
    if all(status == FolderAccessStatus.ACCESSIBLE for status in statuses):
        return FolderAccessStatus.ACCESSIBLE
    return FolderAccessStatus.DENIED


class PermissionCategoryType(str, Enum):
    """Groups of folders shown together on the permissions surface."""

    FULL_DISK_ACCESS = "full_disk_access"
    USER_FOLDERS = "user_folders"
    SYSTEM_FOLDERS = "system_folders"
    APPLICATION_DATA = "application_data"
    STARTUP_PATHS = "startup_paths"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def uses_consent_dialogs(self) -> bool:
        """Whether folders in this category are gated per folder by the OS."""
        return self is PermissionCategoryType.USER_FOLDERS


@dataclass(slots=True)
class FolderAccessInfo:
    """A catalog entry whose readability is probed.

    Only ``status`` changes after construction, and only from the
    coordinating thread.

    Attributes:
        path: Path, optionally starting with ``~``.
        display_name: Human readable name.
        requires_elevated_access: Readable only with full disk access.
        can_trigger_consent_dialog: Reading it may show a one-time OS prompt.
        status: Last observed status.
        home: Home directory used to expand ``~`` (defaults to the real home).
        id: Unique identifier (12-character hex string).
    """

    path: str
    display_name: str
    requires_elevated_access: bool = False
    can_trigger_consent_dialog: bool = False
    status: FolderAccessStatus = FolderAccessStatus.UNCHECKED
    home: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    @property
    def expanded_path(self) -> str:
        """Path with a leading ``~`` replaced by the home directory."""
        if self.home is not None and (self.path == "~" or self.path.startswith("~/")):
            return self.home + self.path[1:]
        return os.path.expanduser(self.path)


@dataclass(slots=True)
class PermissionCategoryState:
    """Folders of one category with their aggregated status."""

    type: PermissionCategoryType
    folders: list[FolderAccessInfo]

    @property
    def overall_status(self) -> FolderAccessStatus:
        return rollup_status(self.folders)

    @property
    def accessible_count(self) -> int:
        return sum(1 for f in self.folders if f.status == FolderAccessStatus.ACCESSIBLE)

    @property
    def existing_count(self) -> int:
        return sum(1 for f in self.folders if f.status != FolderAccessStatus.NOT_EXISTS)

    @property
    def total_count(self) -> int:
        return len(self.folders)

    @property
    def status_summary(self) -> str:
        """Short "accessible/existing" summary."""
        if self.existing_count == 0:
            return "No folders found"
        return f"{self.accessible_count}/{self.existing_count}"
