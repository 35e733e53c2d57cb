"""Expansion of cleanup patterns into concrete targets.

Patterns support a leading ``~`` and a ``*``. The first wildcard is
expanded exactly one directory level deep: the fixed prefix before the
``*`` is listed and every immediate child is returned as is. Anything
after the wildcard is ignored, so a pattern such as
``~/Library/Containers/*/Data/Library/Caches/*`` yields the container
folders themselves rather than their cache subfolders. Items coming from
such patterns are deselected by default so they are only cleaned on an
explicit choice.

Unreadable prefixes yield nothing; use the permission probe to find out
why a location came back empty.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from cleanctl.cleanup.catalog import safe_definitions
from cleanctl.cleanup.models import (
    CleanableItem,
    CleanupCategory,
    CleanupGroup,
    CleanupPathDefinition,
)
from cleanctl.core.cancel import CancellationToken, is_cancelled
from cleanctl.core.paths import expand_home
from cleanctl.errors import CleanctlError
from cleanctl.safety.policy import SafetyPolicy, default_policy
from cleanctl.safety.validator import get_size, validate

logger = logging.getLogger(__name__)

WILDCARD = "*"


def expand_pattern(pattern: str, home: Path | None = None) -> list[str]:
    """Expand a cleanup pattern to existing absolute paths.

    Args:
        pattern: Pattern with an optional leading ``~`` and an optional ``*``.
        home: Home directory used for ``~``. Defaults to ``Path.home()``.

    Returns:
        Sorted list of existing paths. Empty when nothing matches or the
        prefix directory cannot be read.
    """
    expanded = expand_home(pattern, home)

    if WILDCARD not in expanded:
        return [expanded] if os.path.lexists(expanded) else []

    prefix = expanded.split(WILDCARD, 1)[0]
    base = prefix[:-1] if prefix.endswith("/") and len(prefix) > 1 else prefix

    try:
        children = os.listdir(base)
    except OSError as e:
        logger.debug("Cannot list %s for pattern %s: %s", base, pattern, e)
        return []

    return sorted(os.path.join(base, child) for child in children)


def has_inner_wildcard(pattern: str) -> bool:
    """Check whether the wildcard is followed by further path segments."""
    if WILDCARD not in pattern:
        return False
    return "/" in pattern.split(WILDCARD, 1)[1]


@dataclass(frozen=True, slots=True)
class ScanIssue:
    """A path that was found but could not be measured.

    Attributes:
        path: Absolute path.
        reason: Error message from size computation.
    """

    path: str
    reason: str


@dataclass(frozen=True, slots=True)
class _DefinitionResult:
    definition: CleanupPathDefinition
    items: tuple[CleanableItem, ...]
    issues: tuple[ScanIssue, ...]
    rejected: tuple[str, ...]


@dataclass(slots=True)
class CleanupScanResult:
    """Snapshot produced by one cleanup scan.

    Attributes:
        groups: Non-empty groups in catalog order.
        issues: Paths whose size could not be computed.
        rejected: Expanded paths dropped because they are not safe to delete.
        cancelled: Whether the scan stopped early.
    """

    groups: list[CleanupGroup] = field(default_factory=lambda: [])
    issues: list[ScanIssue] = field(default_factory=lambda: [])
    rejected: list[str] = field(default_factory=lambda: [])
    cancelled: bool = False

    @property
    def total_size(self) -> int:
        return sum(group.total_size for group in self.groups)

    @property
    def items(self) -> list[CleanableItem]:
        return [item for group in self.groups for item in group.items]


class CleanupScanner:
    """Expands cleanup definitions and measures the resulting paths.

    Definitions are independent and read-only, so they are processed on
    a thread pool. Each worker returns an immutable tuple; the calling
    thread merges them into the result snapshot.

    Args:
        definitions: Definitions to scan. Defaults to the safe catalog.
        home: Home directory for ``~`` expansion and the safety policy.
        max_workers: Thread pool size.
        include_unsafe: Keep expanded paths that fail validation.
    """

    def __init__(
        self,
        definitions: tuple[CleanupPathDefinition, ...] | None = None,
        *,
        home: Path | None = None,
        max_workers: int = 4,
        include_unsafe: bool = False,
    ) -> None:
        self._definitions = definitions if definitions is not None else safe_definitions()
        self._home = home
        self._max_workers = max(1, max_workers)
        self._include_unsafe = include_unsafe
        self._policy: SafetyPolicy = default_policy(home)

    def scan(self, cancel_token: CancellationToken | None = None) -> CleanupScanResult:
        """Scan every definition and group the cleanable items.

        Args:
            cancel_token: Checked before each definition is expanded.

        Returns:
            CleanupScanResult snapshot.
        """
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [
                executor.submit(self._scan_definition, definition, cancel_token)
                for definition in self._definitions
            ]
            partials = [future.result() for future in futures]

        return self._merge(partials, cancelled=is_cancelled(cancel_token))

    def _scan_definition(
        self,
        definition: CleanupPathDefinition,
        cancel_token: CancellationToken | None,
    ) -> _DefinitionResult | None:
        if is_cancelled(cancel_token):
            return None

        selected = not has_inner_wildcard(definition.pattern)
        items: list[CleanableItem] = []
        issues: list[ScanIssue] = []
        rejected: list[str] = []

        for path in expand_pattern(definition.pattern, self._home):
            if not self._include_unsafe and not validate(path, self._policy).is_valid:
                rejected.append(path)
                continue

            try:
                size = get_size(path)
            except CleanctlError as e:
                logger.warning("Cannot measure %s: %s", path, e)
                issues.append(ScanIssue(path=path, reason=str(e)))
                continue

            items.append(
                CleanableItem(
                    path=path,
                    name=os.path.basename(path),
                    size_bytes=size,
                    category=definition.category,
                    is_selected=selected,
                )
            )

        logger.debug("Expanded %s to %d item(s)", definition.pattern, len(items))
        return _DefinitionResult(definition, tuple(items), tuple(issues), tuple(rejected))

    @staticmethod
    def _merge(
        partials: list[_DefinitionResult | None],
        *,
        cancelled: bool,
    ) -> CleanupScanResult:
        """Merge per-definition results into grouped items.

        A path listed by several definitions is kept once. When one item
        contains another (``~/Library/Caches/Homebrew`` and its children),
        the ancestor is dropped so sizes are not counted twice.
        """
        result = CleanupScanResult(cancelled=cancelled)
        by_path: dict[str, CleanableItem] = {}

        for partial in partials:
            if partial is None:
                continue
            result.issues.extend(partial.issues)
            result.rejected.extend(partial.rejected)
            for item in partial.items:
                by_path.setdefault(item.path, item)

        ancestors: set[str] = set()
        for path in by_path:
            parent = os.path.dirname(path)
            while parent and parent != os.path.dirname(parent):
                if parent in by_path:
                    ancestors.add(parent)
                parent = os.path.dirname(parent)

        grouped: dict[CleanupCategory, list[CleanableItem]] = {}
        for partial in partials:
            if partial is None:
                continue
            for item in partial.items:
                if item.path in ancestors or by_path.get(item.path) is not item:
                    continue
                grouped.setdefault(item.category, []).append(item)

        result.groups = [CleanupGroup(category=c, items=items) for c, items in grouped.items()]
        return result
