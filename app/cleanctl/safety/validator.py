"""Path validation before any deletion.

Every path handed to the deletion executor goes through :func:`validate`
first. Validation is a pure function of the path string, the policy and
the current state of the filesystem (only consulted for symlinks), so it
is safe to call from any thread and to repeat.

Rules are evaluated in order and the first match wins:

1. Empty or whitespace-only input is invalid.
2. The path is normalized (redundant separators and ``.`` segments are
   collapsed, ``~`` is expanded) without resolving symlinks.
3. Any ``..`` in the original string is rejected as traversal, before
   normalization can hide it.
4. Exact matches against protected system paths and the home directory.
5. Exact matches against the personal folders under home.
6. The path must lie inside a safe zone of the allow-list.
7. Symlinks are resolved; a target outside disposable data is rejected.
8. Everything else is safe.
"""

import logging
import os
import stat
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum

from cleanctl.errors import (
    EnumerationError,
    InvalidInputError,
    PathDoesNotExistError,
    PolicyViolationError,
    SizeStatError,
)
from cleanctl.safety.policy import DISPOSABLE_SEGMENTS, SafetyPolicy, current_policy

logger = logging.getLogger(__name__)


class ValidationKind(str, Enum):
    """Outcome of validating a single path.

    Attributes:
        SAFE: Path passed every rule and may be moved to the trash.
        PROTECTED_PATH: Path is a protected system or personal folder.
        OUTSIDE_ALLOWED_PATHS: Path is not inside any safe zone.
        SYMLINK_TO_PROTECTED: Path is a symlink resolving outside disposable data.
        PATH_TRAVERSAL: Path contains a parent-directory token.
        DOES_NOT_EXIST: Path vanished before it could be acted on.
        INVALID_PATH: Path is empty or malformed.
    """

    SAFE = "safe"
    PROTECTED_PATH = "protected_path"
    OUTSIDE_ALLOWED_PATHS = "outside_allowed_paths"
    SYMLINK_TO_PROTECTED = "symlink_to_protected"
    PATH_TRAVERSAL = "path_traversal"
    DOES_NOT_EXIST = "does_not_exist"
    INVALID_PATH = "invalid_path"


_REASONS: dict[ValidationKind, str] = {
    ValidationKind.SAFE: "Path is safe to delete",
    ValidationKind.OUTSIDE_ALLOWED_PATHS: "Path is outside allowed deletion directories",
    ValidationKind.SYMLINK_TO_PROTECTED: "Symlink points to a protected location",
    ValidationKind.PATH_TRAVERSAL: "Path contains traversal sequences (..)",
    ValidationKind.DOES_NOT_EXIST: "Path does not exist",
    ValidationKind.INVALID_PATH: "Invalid or malformed path",
}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of validating a path for deletion.

    Attributes:
        kind: Which rule decided the outcome.
        protected: The protected entry that matched (PROTECTED_PATH only).
    """

    kind: ValidationKind
    protected: str | None = None

    @classmethod
    def safe(cls) -> "ValidationResult":
        return cls(ValidationKind.SAFE)

    @classmethod
    def protected_path(cls, which: str) -> "ValidationResult":
        return cls(ValidationKind.PROTECTED_PATH, which)

    @classmethod
    def outside_allowed_paths(cls) -> "ValidationResult":
        return cls(ValidationKind.OUTSIDE_ALLOWED_PATHS)

    @classmethod
    def symlink_to_protected(cls) -> "ValidationResult":
        return cls(ValidationKind.SYMLINK_TO_PROTECTED)

    @classmethod
    def path_traversal(cls) -> "ValidationResult":
        return cls(ValidationKind.PATH_TRAVERSAL)

    @classmethod
    def does_not_exist(cls) -> "ValidationResult":
        return cls(ValidationKind.DOES_NOT_EXIST)

    @classmethod
    def invalid_path(cls) -> "ValidationResult":
        return cls(ValidationKind.INVALID_PATH)

    @property
    def is_valid(self) -> bool:
        """True only for SAFE results."""
        return self.kind == ValidationKind.SAFE

    @property
    def reason(self) -> str:
        """Human-readable explanation of the result."""
        if self.kind == ValidationKind.PROTECTED_PATH:
            return f"Protected system path: {self.protected}"
        return _REASONS[self.kind]


def normalize_path(path: str, home: str) -> str:
    """Normalize a path string without resolving symlinks.

    Expands a leading ``~``, collapses redundant separators and ``.``
    segments and drops trailing separators. ``..`` segments are collapsed
    lexically as well, which is why traversal is checked on the raw input.

    Args:
        path: Trimmed, non-empty path string.
        home: Home directory used for ``~`` expansion.

    Returns:
        Normalized path string.
    """
    if path == "~" or path.startswith("~/"):
        path = home + path[1:]

    normalized = os.path.normpath(path)
    # POSIX keeps a leading "//" as implementation defined; treat it as "/".
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def _has_traversal(path: str) -> bool:
    return ".." in path


def _is_under(path: str, base: str) -> bool:
    if base == "/":
        return path.startswith("/")
    return path == base or path.startswith(base + "/")


def _check_symlink(path: str, policy: SafetyPolicy) -> bool:
    """Return True when ``path`` is a symlink resolving to a protected place."""
    if not os.path.islink(path):
        return False

    target = os.path.realpath(path)
    segments = set(target.split("/"))
    if segments & DISPOSABLE_SEGMENTS:
        return False

    protected = policy.protected_paths | policy.protected_home_paths
    return any(_is_under(target, entry) for entry in protected)


def validate(path: str, policy: SafetyPolicy | None = None) -> ValidationResult:
    """Validate a single path for safe deletion.

    Args:
        path: Candidate path. May start with ``~``.
        policy: Safety catalogs to apply. Defaults to the policy for the
            current home directory.

    Returns:
        ValidationResult describing the first rule that matched.
    """
    policy = policy if policy is not None else current_policy()

    trimmed = path.strip()
    if not trimmed or "\x00" in trimmed:
        return ValidationResult.invalid_path()

    normalized = normalize_path(trimmed, policy.home)

    if _has_traversal(trimmed):
        return ValidationResult.path_traversal()

    protected = policy.is_protected(normalized)
    if protected is not None:
        return ValidationResult.protected_path(protected)

    if not policy.is_within_allowed(normalized):
        return ValidationResult.outside_allowed_paths()

    if _check_symlink(normalized, policy):
        return ValidationResult.symlink_to_protected()

    return ValidationResult.safe()


def require_safe(path: str, policy: SafetyPolicy | None = None) -> str:
    """Validate a path and raise unless it is safe.

    Returns:
        The normalized path that was validated. Act on this string, not on
        the raw input, so a leading ``~`` is never resolved against the
        working directory.

    Raises:
        InvalidInputError: If the path is empty or malformed.
        PolicyViolationError: If any other rule rejects the path.
    """
    policy = policy if policy is not None else current_policy()
    result = validate(path, policy)
    if result.kind == ValidationKind.INVALID_PATH:
        raise InvalidInputError(result.reason)
    if not result.is_valid:
        raise PolicyViolationError(path, result)

    return normalize_path(path.strip(), policy.home)


def validate_batch(
    paths: Iterable[str],
    policy: SafetyPolicy | None = None,
    *,
    max_workers: int | None = None,
) -> list[tuple[str, ValidationResult]]:
    """Validate several paths independently.

    Validation shares no state between paths, so the batch is spread over
    a thread pool when more than one worker is requested. Input order is
    preserved.

    Args:
        paths: Candidate paths.
        policy: Safety catalogs to apply.
        max_workers: Worker count; None or 1 validates sequentially.

    Returns:
        List of (path, result) tuples in input order.
    """
    policy = policy if policy is not None else current_policy()
    items = list(paths)

    if max_workers is None or max_workers <= 1 or len(items) <= 1:
        return [(p, validate(p, policy)) for p in items]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(lambda p: validate(p, policy), items))
    return list(zip(items, results, strict=True))


def filter_safe_paths(paths: Iterable[str], policy: SafetyPolicy | None = None) -> list[str]:
    """Keep only the paths that validate as safe, in input order."""
    return [p for p in paths if validate(p, policy).is_valid]


def path_exists(path: str) -> bool:
    """Check if a path exists, counting dangling symlinks."""
    return os.path.lexists(path)


def get_size(path: str) -> int:
    """Get the size of a file or directory in bytes.

    Files (and symlinks, which are never followed) report their own
    ``lstat`` size. Directories report the sum over every regular file
    reached by a full walk that does not follow symlinks, so linked
    trees are neither counted nor traversed.

    Args:
        path: Path to measure.

    Returns:
        Size in bytes.

    Raises:
        PathDoesNotExistError: If the path does not exist.
        SizeStatError: If a single file cannot be stat-ed.
        EnumerationError: If the directory cannot be listed.
    """
    try:
        st = os.lstat(path)
    except FileNotFoundError as e:
        msg = f"Path does not exist: {path}"
        raise PathDoesNotExistError(msg) from e
    except OSError as e:
        msg = f"Cannot stat {path}: {e}"
        raise SizeStatError(msg) from e

    if not stat.S_ISDIR(st.st_mode):
        return st.st_size

    return _get_directory_size(path)


def _get_directory_size(path: str) -> int:
    try:
        with os.scandir(path):
            pass
    except OSError as e:
        msg = f"Cannot enumerate directory {path}: {e}"
        raise EnumerationError(msg) from e

    def _on_error(exc: OSError) -> None:
        logger.debug("Skipping unreadable directory during size walk: %s", exc)

    total = 0
    for dirpath, _dirnames, filenames in os.walk(path, onerror=_on_error, followlinks=False):
        for name in filenames:
            try:
                st = os.lstat(os.path.join(dirpath, name))
            except OSError:
                continue
            if stat.S_ISREG(st.st_mode):
                total += st.st_size
    return total
