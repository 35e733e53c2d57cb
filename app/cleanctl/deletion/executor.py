"""Validated, recoverable deletion of candidate batches.

Every candidate is validated right before it is touched. Rejected
candidates are never passed to the trash service; accepted candidates are
moved to the trash one at a time. A failure only affects its own
candidate and is never retried.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from cleanctl.core.cancel import CancellationToken
from cleanctl.deletion.trash import Send2TrashService, TrashService
from cleanctl.errors import (
    InvalidInputError,
    PathNotFoundError,
    PermissionDeniedError,
    PolicyViolationError,
)
from cleanctl.safety.policy import SafetyPolicy
from cleanctl.safety.validator import ValidationResult, require_safe

logger = logging.getLogger(__name__)


class SizedPath(Protocol):
    """Anything with a path and a previously measured size."""

    @property
    def path(self) -> str: ...

    @property
    def size_bytes(self) -> int: ...


@dataclass(frozen=True, slots=True)
class DeletionCandidate:
    """A path scheduled for deletion.

    Attributes:
        path: Path as listed by a scan.
        size_bytes: Size measured during the scan.
    """

    path: str
    size_bytes: int = 0


@dataclass(frozen=True, slots=True)
class DeletionError:
    """A candidate that was not deleted.

    Attributes:
        path: Candidate path.
        reason: Validation reason or underlying I/O error.
    """

    path: str
    reason: str


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Outcome of one deletion batch.

    Attributes:
        success_count: Candidates moved to the trash.
        failed_count: Candidates rejected or not moved.
        errors: One entry per failed candidate, in input order.
        freed_bytes: Sum of pre-recorded sizes of deleted candidates.
        deleted: Paths that were moved to the trash, in input order.
        dry_run: Whether the trash service was bypassed.
    """

    success_count: int
    failed_count: int
    errors: tuple[DeletionError, ...]
    freed_bytes: int
    deleted: tuple[str, ...] = ()
    dry_run: bool = False

    @property
    def total(self) -> int:
        return self.success_count + self.failed_count


class DeletionExecutor:
    """Validates candidates and moves the safe ones to the trash.

    Args:
        trash: Trash service. Defaults to :class:`Send2TrashService`.
        policy: Safety policy. Defaults to the policy of the current user.
        dry_run: Count validated candidates as deleted without trashing them.
    """

    def __init__(
        self,
        trash: TrashService | None = None,
        *,
        policy: SafetyPolicy | None = None,
        dry_run: bool = False,
    ) -> None:
        self._trash = trash or Send2TrashService()
        self._policy = policy
        self._dry_run = dry_run

    def execute(
        self,
        candidates: Iterable[SizedPath],
        cancel_token: CancellationToken | None = None,
    ) -> DeletionResult:
        """Delete a batch of candidates sequentially.

        The batch always runs to completion. The cancellation token is
        only consulted before the first candidate.

        Args:
            candidates: Ordered candidates with pre-recorded sizes.
            cancel_token: Token of the session requesting the batch.

        Returns:
            DeletionResult for the whole batch.

        Raises:
            CancelledError: If the token was cancelled before the batch started.
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        success_count = 0
        freed_bytes = 0
        errors: list[DeletionError] = []
        deleted: list[str] = []

        for candidate in candidates:
            try:
                target = require_safe(candidate.path, self._policy)
                self._trash_single(target)
            except PolicyViolationError as e:
                logger.info("Skipping %s: %s", candidate.path, e.result.reason)
                errors.append(DeletionError(path=candidate.path, reason=e.result.reason))
                continue
            except (InvalidInputError, PathNotFoundError, PermissionDeniedError) as e:
                logger.info("Not deleted %s: %s", candidate.path, e)
                errors.append(DeletionError(path=candidate.path, reason=str(e)))
                continue
            except OSError as e:
                logger.warning("Failed to move %s to trash: %s", candidate.path, e)
                errors.append(DeletionError(path=candidate.path, reason=str(e)))
                continue

            success_count += 1
            freed_bytes += candidate.size_bytes
            deleted.append(candidate.path)

        logger.info(
            "Deletion batch finished: %d deleted, %d failed, %d bytes freed",
            success_count,
            len(errors),
            freed_bytes,
        )
        return DeletionResult(
            success_count=success_count,
            failed_count=len(errors),
            errors=tuple(errors),
            freed_bytes=freed_bytes,
            deleted=tuple(deleted),
            dry_run=self._dry_run,
        )

    def _trash_single(self, path: str) -> None:
        """Move one validated path to the trash.

        Raises:
            PathNotFoundError: If the path vanished after it was listed.
            PermissionDeniedError: If the OS refused the move.
            OSError: For any other failed move.
        """
        if self._dry_run:
            logger.info("Dry-run: would move %s to trash", path)
            return

        try:
            self._trash.trash(path)
        except FileNotFoundError as e:
            raise PathNotFoundError(ValidationResult.does_not_exist().reason) from e
        except PermissionError as e:
            raise PermissionDeniedError(str(e)) from e
