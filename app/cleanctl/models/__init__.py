"""Data models for cleanctl.

This module exports the persisted history structures.
"""

from cleanctl.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)

__all__ = [
    "HistoryActionType",
    "HistoryEntry",
    "HistoryItem",
    "create_history_entry",
]
