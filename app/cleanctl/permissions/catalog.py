"""Folder catalog probed by the permissions surface."""

from pathlib import Path

from cleanctl.permissions.models import (
    FolderAccessInfo,
    PermissionCategoryState,
    PermissionCategoryType,
)

# (path, display name, requires elevated access, can trigger consent dialog)
FolderSpec = tuple[str, str, bool, bool]

FOLDER_CATALOG: dict[PermissionCategoryType, tuple[FolderSpec, ...]] = {
    PermissionCategoryType.FULL_DISK_ACCESS: (
        ("~/Library/Application Support/com.apple.TCC/TCC.db", "TCC Database", True, False),
        ("~/Library/Safari/Bookmarks.plist", "Safari Bookmarks", True, False),
        ("~/Library/Mail", "Mail Library", True, False),
        (
            "~/Library/Containers/com.apple.mail/Data/Library/Mail Downloads",
            "Mail Attachments",
            True,
            False,
        ),
    ),
    PermissionCategoryType.USER_FOLDERS: (
        ("~/Downloads", "Downloads", False, True),
        ("~/Documents", "Documents", False, True),
        ("~/Desktop", "Desktop", False, True),
    ),
    PermissionCategoryType.SYSTEM_FOLDERS: (
        ("/Library/Caches", "System Caches", True, False),
        ("/Library/Logs", "System Logs", True, False),
        ("/Library/LaunchAgents", "System Launch Agents", False, False),
        ("/Library/LaunchDaemons", "System Launch Daemons", False, False),
    ),
    PermissionCategoryType.APPLICATION_DATA: (
        ("~/Library/Caches", "User Caches", False, False),
        ("~/Library/Logs", "User Logs", False, False),
        ("~/Library/Caches/com.apple.Safari", "Safari Cache", False, False),
        ("~/Library/Caches/Google/Chrome", "Chrome Cache", False, False),
        ("~/Library/Developer/Xcode/DerivedData", "Xcode DerivedData", False, False),
        ("~/.Trash", "Trash", False, False),
    ),
    PermissionCategoryType.STARTUP_PATHS: (
        ("~/Library/LaunchAgents", "User Launch Agents", False, False),
        ("/System/Library/LaunchAgents", "Apple Launch Agents", False, False),
        ("/System/Library/LaunchDaemons", "Apple Launch Daemons", False, False),
    ),
}


def build_categories(home: Path | None = None) -> list[PermissionCategoryState]:
    """Build fresh category states with every folder unchecked.

    Args:
        home: Home directory for ``~`` expansion. Defaults to the real home.

    Returns:
        One PermissionCategoryState per category, in catalog order.
    """
    home_str = str(home) if home is not None else None
    return [
        PermissionCategoryState(
            type=category,
            folders=[
                FolderAccessInfo(
                    path=path,
                    display_name=name,
                    requires_elevated_access=elevated,
                    can_trigger_consent_dialog=consent,
                    home=home_str,
                )
                for path, name, elevated, consent in specs
            ],
        )
        for category, specs in FOLDER_CATALOG.items()
    ]
