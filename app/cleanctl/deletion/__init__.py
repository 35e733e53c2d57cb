"""Validated deletion through the trash.

This module provides the deletion executor and the trash primitives it
relies on.
"""

from cleanctl.deletion.executor import (
    DeletionCandidate,
    DeletionError,
    DeletionExecutor,
    DeletionResult,
)
from cleanctl.deletion.trash import Send2TrashService, TrashService, trash_size

__all__ = [
    "DeletionCandidate",
    "DeletionError",
    "DeletionExecutor",
    "DeletionResult",
    "Send2TrashService",
    "TrashService",
    "trash_size",
]
