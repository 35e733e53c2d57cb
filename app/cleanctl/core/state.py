"""State management for deletion history.

This module provides the StateManager class for persisting and querying
history entries in a JSONL file.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from cleanctl.core.paths import ensure_state_dir, get_state_dir
from cleanctl.deletion.executor import DeletionResult, SizedPath
from cleanctl.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)

logger = logging.getLogger(__name__)


class StateManager:
    """Manages history state in a JSONL file.

    Storage location: ~/.local/state/cleanctl/history.jsonl

    Each line is a complete JSON object representing a HistoryEntry, so
    writes are append-only.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for the state directory.
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        return self._state_dir / self.HISTORY_FILENAME

    def record_action(self, entry: HistoryEntry) -> None:
        """Append an entry to the history file.

        Args:
            entry: The history entry to record.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(entry.to_json_line() + "\n")
            f.flush()

    def record_batch(
        self,
        action_type: HistoryActionType,
        candidates: Iterable[SizedPath],
        result: DeletionResult,
        command: str,
    ) -> HistoryEntry | None:
        """Record the paths a deletion batch moved to the trash.

        Dry runs and batches that moved nothing are not recorded.

        Args:
            action_type: Kind of batch.
            candidates: Candidates passed to the executor.
            result: Result returned by the executor.
            command: CLI command that ran the batch.

        Returns:
            The recorded entry, or None if nothing was recorded.
        """
        if result.dry_run or not result.deleted:
            return None

        deleted = set(result.deleted)
        items = [
            HistoryItem(path=candidate.path, size_bytes=candidate.size_bytes)
            for candidate in candidates
            if candidate.path in deleted
        ]
        entry = create_history_entry(
            action_type,
            items,
            failed_count=result.failed_count,
            metadata={"command": command},
        )
        self.record_action(entry)
        return entry

    def get_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Read history entries, newest first.

        Corrupt lines are skipped with a warning.

        Args:
            limit: Maximum number of entries to return (None for all).

        Returns:
            List of HistoryEntry, newest first. Empty if there is no file.
        """
        if not self.history_path.exists():
            return []

        entries: list[HistoryEntry] = []
        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(HistoryEntry.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, str(e))

        entries.reverse()
        if limit is not None:
            return entries[:limit]
        return entries

    def total_freed(self) -> int:
        """Sum of bytes freed by all recorded batches."""
        return sum(entry.freed_bytes for entry in self.get_history())
