"""History entry model for executed deletion batches.

Every batch that moved something to the trash is recorded, so the user
can find out later what was removed and from where to restore it.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class HistoryActionType(str, Enum):
    """Type of batch recorded in history.

    Attributes:
        CLEAN: Cleanup catalog items moved to the trash.
        ORPHAN_CLEAN: Application leftovers moved to the trash.
    """

    CLEAN = "clean"
    ORPHAN_CLEAN = "orphan_clean"


@dataclass(frozen=True, slots=True)
class HistoryItem:
    """Single path moved to the trash.

    Attributes:
        path: Original absolute path.
        size_bytes: Size measured before deletion.
    """

    path: str
    size_bytes: int = 0

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "size_bytes": self.size_bytes}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryItem":
        """Deserialize from dictionary.

        Raises:
            KeyError: If the path is missing.
        """
        return cls(path=data["path"], size_bytes=int(data.get("size_bytes", 0)))


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Record of one deletion batch.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the batch ran (ISO 8601 format with timezone).
        action_type: Kind of batch.
        items: Paths that were moved to the trash.
        freed_bytes: Sum of the sizes of the moved paths.
        failed_count: Candidates that were rejected or failed.
        metadata: Additional context (command, etc.).
    """

    id: str
    timestamp: str
    action_type: HistoryActionType
    items: tuple[HistoryItem, ...]
    freed_bytes: int = 0
    failed_count: int = 0
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "History entry ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "action_type": self.action_type.value,
            "items": [item.to_dict() for item in self.items],
            "freed_bytes": self.freed_bytes,
            "failed_count": self.failed_count,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If action_type or item data is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            action_type=HistoryActionType(data["action_type"]),
            items=tuple(HistoryItem.from_dict(item) for item in data["items"]),
            freed_bytes=int(data.get("freed_bytes", 0)),
            failed_count=int(data.get("failed_count", 0)),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "HistoryEntry":
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))


def create_history_entry(
    action_type: HistoryActionType,
    items: list[HistoryItem],
    *,
    failed_count: int = 0,
    metadata: dict[str, Any] | None = None,
) -> HistoryEntry:
    """Create a new HistoryEntry with a fresh ID and timestamp.

    Args:
        action_type: Kind of batch.
        items: Paths moved to the trash.
        failed_count: Candidates that were not moved.
        metadata: Optional additional context.

    Returns:
        New HistoryEntry. ``freed_bytes`` is the sum of the item sizes.
    """
    return HistoryEntry(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        action_type=action_type,
        items=tuple(items),
        freed_bytes=sum(item.size_bytes for item in items),
        failed_count=failed_count,
        metadata=metadata or {},
    )
