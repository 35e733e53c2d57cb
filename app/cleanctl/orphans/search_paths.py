"""Locations searched for application leftovers.

Each root is paired with the leftover category its children belong to.
User roots come first, then root-owned system roots. Every root lies
inside the deletion allow-list, so anything found here can be trashed.
"""

from pathlib import Path

from cleanctl.orphans.models import LeftoverCategory

SearchRoot = tuple[str, LeftoverCategory]

_USER_LIBRARY_ROOTS: tuple[tuple[str, LeftoverCategory], ...] = (
    ("Library/Application Support", LeftoverCategory.APPLICATION_SUPPORT),
    ("Library/Preferences", LeftoverCategory.PREFERENCES),
    ("Library/Caches", LeftoverCategory.CACHE),
    ("Library/Containers", LeftoverCategory.CONTAINER),
    ("Library/Logs", LeftoverCategory.LOGS),
    ("Library/Saved Application State", LeftoverCategory.SAVED_STATE),
    ("Library/Cookies", LeftoverCategory.COOKIES),
    ("Library/WebKit", LeftoverCategory.WEBKIT),
    ("Library/HTTPStorages", LeftoverCategory.CACHE),
    ("Library/Group Containers", LeftoverCategory.CONTAINER),
    ("Library/Application Scripts", LeftoverCategory.OTHER),
)

SYSTEM_LIBRARY_ROOTS: tuple[SearchRoot, ...] = (
    ("/Library/Application Support", LeftoverCategory.APPLICATION_SUPPORT),
    ("/Library/Caches", LeftoverCategory.CACHE),
    ("/Library/LaunchAgents", LeftoverCategory.LAUNCH_ITEM),
    ("/Library/LaunchDaemons", LeftoverCategory.LAUNCH_ITEM),
    ("/Library/Logs/DiagnosticReports", LeftoverCategory.CRASH_REPORTS),
)


def user_library_paths(home: Path | None = None) -> tuple[SearchRoot, ...]:
    """Get the per-user leftover roots.

    Args:
        home: Home directory. Defaults to ``Path.home()``.

    Returns:
        Tuple of (absolute root, category) pairs.
    """
    base = home if home is not None else Path.home()
    return tuple((str(base / sub), category) for sub, category in _USER_LIBRARY_ROOTS)


def system_library_paths() -> tuple[SearchRoot, ...]:
    """Get the system-wide leftover roots."""
    return SYSTEM_LIBRARY_ROOTS


def all_paths(home: Path | None = None, *, include_system: bool = True) -> tuple[SearchRoot, ...]:
    """Get user roots followed by system roots.

    Args:
        home: Home directory. Defaults to ``Path.home()``.
        include_system: Whether to append the system roots.

    Returns:
        Tuple of (absolute root, category) pairs.
    """
    user = user_library_paths(home)
    return (*user, *system_library_paths()) if include_system else user
