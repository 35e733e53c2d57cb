"""Folder readability probing.

This module provides the folder catalog, the access status models, and
the two-phase permission probe.
"""

from cleanctl.permissions.catalog import build_categories
from cleanctl.permissions.models import (
    FolderAccessInfo,
    FolderAccessStatus,
    PermissionCategoryState,
    PermissionCategoryType,
    rollup_status,
)
from cleanctl.permissions.probe import (
    AccessProber,
    FilesystemProber,
    PermissionProbe,
    has_full_disk_access,
)

__all__ = [
    "AccessProber",
    "FilesystemProber",
    "FolderAccessInfo",
    "FolderAccessStatus",
    "PermissionCategoryState",
    "PermissionCategoryType",
    "PermissionProbe",
    "build_categories",
    "has_full_disk_access",
    "rollup_status",
]
