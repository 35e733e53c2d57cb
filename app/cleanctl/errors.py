"""Exception hierarchy for cleanctl.

Per-item problems (invalid input, policy violations, vanished paths,
permission refusals) are normally reported in result objects rather than
raised. These exceptions exist for the places where a single operation
on a single path has to fail loudly, such as size computation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cleanctl.safety.validator import ValidationResult


class CleanctlError(Exception):
    """Base exception for all cleanctl errors."""


class InvalidInputError(CleanctlError):
    """Raised when a path is empty or malformed."""


class PolicyViolationError(CleanctlError):
    """Raised when a path is rejected by the safety policy.

    Attributes:
        path: The rejected path.
        result: The non-safe validation result.
    """

    def __init__(self, path: str, result: ValidationResult) -> None:
        self.path = path
        self.result = result
        super().__init__(f"{path}: {result.reason}")


class PathNotFoundError(CleanctlError):
    """Raised when a path vanished between enumeration and action."""


class PermissionDeniedError(CleanctlError):
    """Raised when the OS refuses a read or write."""


class EnumerationError(CleanctlError):
    """Raised when a directory cannot be listed during size computation."""


class PathDoesNotExistError(PathNotFoundError):
    """Raised by size computation when the path does not exist."""


class SizeStatError(CleanctlError):
    """Raised when a single file cannot be stat-ed."""


class CancelledError(CleanctlError):
    """Raised when work is requested on an already cancelled token."""
