"""Cleanup domain models.

Defines the static cleanup path definitions, the categories they belong
to, and the cleanable items produced by expanding and measuring them.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class CleanupCategory(str, Enum):
    """Category of a cleanup target.

    The value is the label shown to the user.
    """

    SYSTEM_CACHES = "System Caches"
    USER_CACHES = "User Caches"
    LOGS = "Logs"
    TRASH = "Trash"
    XCODE_DERIVED_DATA = "Xcode Derived Data"
    XCODE_ARCHIVES = "Xcode Archives"
    XCODE_DEVICE_SUPPORT = "Xcode Device Support"
    HOMEBREW = "Homebrew Cache"
    NPM = "npm Cache"
    PIP = "pip Cache"
    DOCKER_IMAGES = "Docker Images"
    MAIL_ATTACHMENTS = "Mail Attachments"
    SAFARI_CACHE = "Safari Cache"
    SPOTLIGHT_INDEX = "Spotlight Index"
    APPLICATION_LEFTOVERS = "Application Leftovers"

    @property
    def is_safe_to_clean(self) -> bool:
        """Whether items in this category may be cleaned without review."""
        return self not in (CleanupCategory.MAIL_ATTACHMENTS, CleanupCategory.SPOTLIGHT_INDEX)


@dataclass(frozen=True, slots=True)
class CleanupPathDefinition:
    """A configured cleanup location.

    Attributes:
        pattern: Path pattern with an optional leading ``~``. Only the
            first ``*`` is expanded; anything after it is ignored.
        category: Category the expanded paths belong to.
        description: Human-readable description of the location.
        requires_root: Whether the location is root-owned.
        safe_to_clean: Whether the location is cleaned by default.
    """

    pattern: str
    category: CleanupCategory
    description: str
    requires_root: bool = False
    safe_to_clean: bool = True

    def __post_init__(self) -> None:
        """Validate the pattern after initialization."""
        if not self.pattern:
            msg = "Pattern cannot be empty"
            raise ValueError(msg)

    def expanded_paths(self) -> list[str]:
        """Expand the pattern to currently existing absolute paths."""
        from cleanctl.cleanup.expander import expand_pattern

        return expand_pattern(self.pattern)


@dataclass(slots=True)
class CleanableItem:
    """A concrete file or directory that can be cleaned.

    Only ``is_selected`` changes after creation; items are dropped from
    the working set after a successful deletion or a rescan.

    Attributes:
        path: Absolute path.
        name: Display name (final path segment).
        size_bytes: Size measured at scan time.
        category: Category of the definition that produced the item.
        is_selected: Whether the item is selected for deletion.
        id: Unique identifier (12-character hex string).
    """

    path: str
    name: str
    size_bytes: int
    category: CleanupCategory
    is_selected: bool = True
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    def toggle_selected(self) -> None:
        """Flip the selection state."""
        self.is_selected = not self.is_selected


@dataclass(slots=True)
class CleanupGroup:
    """Cleanable items of one category, for display and selection."""

    category: CleanupCategory
    items: list[CleanableItem]

    @property
    def total_size(self) -> int:
        return sum(item.size_bytes for item in self.items)

    @property
    def selected_items(self) -> list[CleanableItem]:
        return [item for item in self.items if item.is_selected]

    @property
    def selected_count(self) -> int:
        return len(self.selected_items)

    @property
    def selected_size(self) -> int:
        return sum(item.size_bytes for item in self.selected_items)

    def remove_paths(self, paths: set[str]) -> None:
        """Drop items whose path is in ``paths`` (e.g. after deletion)."""
        self.items = [item for item in self.items if item.path not in paths]
