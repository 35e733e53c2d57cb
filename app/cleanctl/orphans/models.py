"""Orphan detection domain models.

This module defines installed applications, leftover file categories,
the confidence scale used to rank leftovers, and the leftover records
produced by a detector sweep.
"""

import os
import uuid
from dataclasses import dataclass, field
from enum import Enum


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class LeftoverCategory(str, Enum):
    """Kind of location a leftover was found in."""

    CACHE = "Cache"
    PREFERENCES = "Preferences"
    APPLICATION_SUPPORT = "Application Support"
    CONTAINER = "Container"
    LOGS = "Logs"
    LAUNCH_ITEM = "Launch Item"
    COOKIES = "Cookies"
    SAVED_STATE = "Saved State"
    WEBKIT = "WebKit Data"
    CRASH_REPORTS = "Crash Reports"
    OTHER = "Other"


_CONFIDENCE_RANK: dict[str, int] = {"low": 0, "medium": 1, "high": 2}


class LeftoverConfidence(str, Enum):
    """Certainty that a leftover belongs to an uninstalled application.

    Totally ordered: LOW < MEDIUM < HIGH.

    Attributes:
        HIGH: Exact bundle identifier match.
        MEDIUM: Developer segment of the identifier matches a known app.
        LOW: Fuzzy textual or developer-name match only.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self.value]

    @property
    def description(self) -> str:
        if self is LeftoverConfidence.HIGH:
            return "Exact match - safe to remove"
        if self is LeftoverConfidence.MEDIUM:
            return "Likely match - review recommended"
        return "Possible match - verify before removing"

    # Compare by rank, not by the string value
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LeftoverConfidence):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LeftoverConfidence):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LeftoverConfidence):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LeftoverConfidence):
            return NotImplemented
        return self.rank >= other.rank


@dataclass(frozen=True, slots=True)
class InstalledApp:
    """An application known to the installed-application registry.

    Equality and hashing use the bundle identifier only.

    Attributes:
        name: Display name (e.g. "Microsoft Word").
        bundle_identifier: Reverse-DNS identifier (e.g. "com.microsoft.Word").
        path: Bundle path.
        version: Short version string, if known.
        size_bytes: Bundle size in bytes.
        id: Unique identifier (12-character hex string).
    """

    name: str
    bundle_identifier: str
    path: str
    version: str | None = None
    size_bytes: int = 0
    id: str = field(default_factory=_new_id, compare=False)

    def __post_init__(self) -> None:
        """Validate app data after initialization."""
        if not self.bundle_identifier:
            msg = "Bundle identifier cannot be empty"
            raise ValueError(msg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InstalledApp):
            return NotImplemented
        return self.bundle_identifier == other.bundle_identifier

    def __hash__(self) -> int:
        return hash(self.bundle_identifier)

    @property
    def developer_name(self) -> str | None:
        """Developer segment of the identifier ("com.microsoft.Word" -> "microsoft")."""
        return developer_segment(self.bundle_identifier)


def developer_segment(identifier: str) -> str | None:
    """Get the second reverse-DNS segment of an identifier, lowercased."""
    components = identifier.split(".")
    if len(components) < 2 or not components[1]:
        return None
    return components[1].lower()


@dataclass(frozen=True, slots=True)
class LeftoverFile:
    """Filesystem residue attributed to an uninstalled application.

    Attributes:
        path: Absolute path of the leftover.
        size_bytes: Size in bytes (0 when it could not be measured).
        category: Kind of location it was found in.
        confidence: Rank of the rule that classified it.
        related_bundle_id: Identifier of the suspected owning application.
        mtime: Last modification time in ISO 8601 format, for triage.
        id: Unique identifier (12-character hex string).
    """

    path: str
    size_bytes: int
    category: LeftoverCategory
    confidence: LeftoverConfidence
    related_bundle_id: str | None = None
    mtime: str | None = None
    id: str = field(default_factory=_new_id, compare=False)

    def __post_init__(self) -> None:
        """Validate leftover data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def parent_path(self) -> str:
        return os.path.dirname(self.path)
