"""Deletion safety policy catalogs.

Deletion is deny-by-default: a path may only be removed when it lies
inside one of the allow-listed safe zones below. The protected sets are
consulted first so that the roots of the system and the user's personal
folders can never be targeted, even by an allow-list mistake.

All catalogs are immutable and bound to a home directory through
:func:`default_policy`, so tests can build a policy for a temporary home
without touching the real one.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

# Absolute paths that must never be deleted themselves.
PROTECTED_SYSTEM_PATHS: tuple[str, ...] = (
    "/",
    "/System",
    "/Library",
    "/Users",
    "/Applications",
    "/bin",
    "/sbin",
    "/usr",
    "/var",
    "/private",
    "/etc",
    "/tmp",
    "/cores",
    "/dev",
    "/opt",
    "/Volumes",
)

# Personal folders directly under the home directory.
PROTECTED_HOME_SUBDIRS: tuple[str, ...] = (
    "Desktop",
    "Documents",
    "Downloads",
    "Movies",
    "Music",
    "Pictures",
    "Public",
)

# Safe zones relative to the home directory.
ALLOWED_HOME_SUBPATHS: tuple[str, ...] = (
    # User Library
    "Library/Caches",
    "Library/Logs",
    "Library/Application Support",
    "Library/Containers",
    "Library/Saved Application State",
    "Library/Cookies",
    "Library/HTTPStorages",
    "Library/WebKit",
    "Library/Preferences",
    "Library/Group Containers",
    "Library/Application Scripts",
    ".Trash",
    # Developer tools
    "Library/Developer/Xcode/DerivedData",
    "Library/Developer/Xcode/Archives",
    "Library/Developer/Xcode/iOS DeviceSupport",
    "Library/Developer/CoreSimulator",
    # Package managers
    ".npm",
    ".cache",
    ".local/share/Trash",
)

# Root-owned safe zones.
ALLOWED_SYSTEM_PATHS: tuple[str, ...] = (
    "/Library/Caches",
    "/Library/Logs",
    "/Library/LaunchAgents",
    "/Library/LaunchDaemons",
    "/Library/Application Support",
    "/private/var/folders",
)

# Final path segments that mark an allow-list entry as a leaf cache,
# derived-data or trash directory which may itself be removed.
LEAF_BASE_NAMES: frozenset[str] = frozenset({"Caches", ".cache", "DerivedData", ".Trash", "Trash"})

# Segments that mark a symlink target as living in disposable data.
DISPOSABLE_SEGMENTS: frozenset[str] = frozenset({"Caches", ".cache", ".Trash"})


@dataclass(frozen=True, slots=True)
class SafetyPolicy:
    """Immutable set of catalogs used by the path validator.

    Attributes:
        home: Absolute home directory the catalogs were built for.
        protected_paths: Exact paths that must never be deleted.
        protected_home_paths: Exact personal folders under home.
        allowed_base_paths: Roots of the safe zones.
        leaf_allowed_paths: Allow-list entries that may be deleted themselves.
    """

    home: str
    protected_paths: frozenset[str]
    protected_home_paths: frozenset[str]
    allowed_base_paths: tuple[str, ...]
    leaf_allowed_paths: frozenset[str]

    def is_protected(self, path: str) -> str | None:
        """Return the protected entry equal to ``path``, if any."""
        if path in self.protected_paths:
            return path
        if path in self.protected_home_paths:
            return path
        return None

    def is_within_allowed(self, path: str) -> bool:
        """Check whether ``path`` lies inside a safe zone.

        A path qualifies when it is a strict descendant of an allow-list
        entry, or when it equals a leaf allow-list entry.
        """
        if path in self.leaf_allowed_paths:
            return True
        return any(path.startswith(base + "/") for base in self.allowed_base_paths)


def default_policy(home: Path | str | None = None) -> SafetyPolicy:
    """Build the default safety policy for a home directory.

    Leaf entries are only taken from the home-relative safe zones; the
    root-owned cache roots are never deletable as a whole.

    Args:
        home: Home directory. Defaults to ``Path.home()``.

    Returns:
        SafetyPolicy bound to the given home directory.
    """
    home_str = str(home if home is not None else Path.home()).rstrip("/") or "/"

    home_allowed = tuple(f"{home_str}/{sub}" for sub in ALLOWED_HOME_SUBPATHS)
    leaf = frozenset(p for p in home_allowed if p.rsplit("/", 1)[-1] in LEAF_BASE_NAMES)

    return SafetyPolicy(
        home=home_str,
        protected_paths=frozenset((*PROTECTED_SYSTEM_PATHS, home_str)),
        protected_home_paths=frozenset(f"{home_str}/{sub}" for sub in PROTECTED_HOME_SUBDIRS),
        allowed_base_paths=home_allowed + ALLOWED_SYSTEM_PATHS,
        leaf_allowed_paths=leaf,
    )


@lru_cache(maxsize=8)
def _cached_policy(home: str) -> SafetyPolicy:
    return default_policy(home)


def current_policy() -> SafetyPolicy:
    """Get the default policy for the current user's home directory.

    The policy is cached per home directory, so a changed ``Path.home()``
    (e.g. in tests) yields a fresh policy.
    """
    return _cached_policy(str(Path.home()))
