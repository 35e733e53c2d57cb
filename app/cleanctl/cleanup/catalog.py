"""Static catalog of cleanup locations.

Each definition maps a path pattern to a category. Patterns use ``~`` for
the user's home. The first ``*`` is resolved one directory level deep
and later segments, wildcards included, are ignored (see
:mod:`cleanctl.cleanup.expander`).
"""

from cleanctl.cleanup.models import CleanupCategory, CleanupPathDefinition

SYSTEM_CACHES: tuple[CleanupPathDefinition, ...] = (
    CleanupPathDefinition(
        pattern="~/Library/Caches/*",
        category=CleanupCategory.USER_CACHES,
        description="User application caches",
    ),
    CleanupPathDefinition(
        pattern="/Library/Caches/*",
        category=CleanupCategory.SYSTEM_CACHES,
        description="System-wide caches",
        requires_root=True,
    ),
)

LOGS: tuple[CleanupPathDefinition, ...] = (
    CleanupPathDefinition(
        pattern="~/Library/Logs/*",
        category=CleanupCategory.LOGS,
        description="User application logs",
    ),
    CleanupPathDefinition(
        pattern="/Library/Logs/*",
        category=CleanupCategory.LOGS,
        description="System logs",
        requires_root=True,
    ),
    # Some system logs are important
    CleanupPathDefinition(
        pattern="/private/var/log/*",
        category=CleanupCategory.LOGS,
        description="System log files",
        requires_root=True,
        safe_to_clean=False,
    ),
)

XCODE: tuple[CleanupPathDefinition, ...] = (
    CleanupPathDefinition(
        pattern="~/Library/Developer/Xcode/DerivedData/*",
        category=CleanupCategory.XCODE_DERIVED_DATA,
        description="Xcode build artifacts and indexes",
    ),
    CleanupPathDefinition(
        pattern="~/Library/Developer/Xcode/Archives/*",
        category=CleanupCategory.XCODE_ARCHIVES,
        description="Xcode app archives",
        safe_to_clean=False,
    ),
    CleanupPathDefinition(
        pattern="~/Library/Developer/Xcode/iOS DeviceSupport/*",
        category=CleanupCategory.XCODE_DEVICE_SUPPORT,
        description="iOS device debug symbols",
    ),
    # Expands to the simulator device folders only; the trailing
    # "/data/Caches/*" is not matched.
    CleanupPathDefinition(
        pattern="~/Library/Developer/CoreSimulator/Devices/*/data/Caches/*",
        category=CleanupCategory.XCODE_DERIVED_DATA,
        description="Simulator caches",
    ),
    CleanupPathDefinition(
        pattern="~/Library/Developer/CoreSimulator/Caches/*",
        category=CleanupCategory.XCODE_DERIVED_DATA,
        description="CoreSimulator caches",
    ),
)

HOMEBREW: tuple[CleanupPathDefinition, ...] = (
    CleanupPathDefinition(
        pattern="~/Library/Caches/Homebrew/*",
        category=CleanupCategory.HOMEBREW,
        description="Homebrew downloaded packages",
    ),
    CleanupPathDefinition(
        pattern="/opt/homebrew/Caskroom/*/.metadata",
        category=CleanupCategory.HOMEBREW,
        description="Homebrew Cask metadata",
    ),
    CleanupPathDefinition(
        pattern="/usr/local/Caskroom/*/.metadata",
        category=CleanupCategory.HOMEBREW,
        description="Homebrew Cask metadata (Intel)",
    ),
)

NPM: tuple[CleanupPathDefinition, ...] = (
    CleanupPathDefinition(
        pattern="~/.npm/_cacache/*",
        category=CleanupCategory.NPM,
        description="npm package cache",
    ),
    CleanupPathDefinition(
        pattern="~/.npm/_logs/*",
        category=CleanupCategory.NPM,
        description="npm log files",
    ),
)

PIP: tuple[CleanupPathDefinition, ...] = (
    CleanupPathDefinition(
        pattern="~/Library/Caches/pip/*",
        category=CleanupCategory.PIP,
        description="Python pip cache",
    ),
)

OTHER_CACHES: tuple[CleanupPathDefinition, ...] = (
    CleanupPathDefinition(
        pattern="~/.cache/*",
        category=CleanupCategory.USER_CACHES,
        description="XDG cache directory",
    ),
    CleanupPathDefinition(
        pattern="~/Library/Containers/*/Data/Library/Caches/*",
        category=CleanupCategory.USER_CACHES,
        description="Sandboxed app caches",
    ),
)

TRASH: tuple[CleanupPathDefinition, ...] = (
    CleanupPathDefinition(
        pattern="~/.Trash/*",
        category=CleanupCategory.TRASH,
        description="User Trash",
    ),
    CleanupPathDefinition(
        pattern="/Volumes/*/.Trashes/*",
        category=CleanupCategory.TRASH,
        description="External drive trash",
        requires_root=True,
    ),
)

CLEANUP_PATHS: tuple[CleanupPathDefinition, ...] = (
    *SYSTEM_CACHES,
    *LOGS,
    *XCODE,
    *HOMEBREW,
    *NPM,
    *PIP,
    *OTHER_CACHES,
    *TRASH,
)


def all_definitions() -> tuple[CleanupPathDefinition, ...]:
    """Get every cleanup definition in catalog order."""
    return CLEANUP_PATHS


def safe_definitions() -> tuple[CleanupPathDefinition, ...]:
    """Get the definitions that are cleaned by default."""
    return tuple(d for d in CLEANUP_PATHS if d.safe_to_clean)


def definitions_for(category: CleanupCategory) -> tuple[CleanupPathDefinition, ...]:
    """Get the definitions belonging to one category."""
    return tuple(d for d in CLEANUP_PATHS if d.category == category)
