"""Detection of leftovers from uninstalled applications.

The detector lists the immediate children of each search root, derives an
identifier-like token from every child's name, and cross-references the
token against the installed-application snapshot:

1. The token equals (or is a sub-identifier of) an installed bundle
   identifier: owned by a live app, never reported.
2. The name contains an installed app's display name: still live, never
   reported.
3. Known system items are skipped.
4. A reverse-DNS token whose developer segment matches the developer of a
   known identifier is reported with MEDIUM confidence.
5. A name that only fuzzily matches a known developer or app name is
   reported with LOW confidence.
6. Anything else carries no owning-application signal and is not
   reported.

No age or size filtering is applied; both are attached for triage.
"""

import logging
import os
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from cleanctl.core.cancel import CancellationToken, is_cancelled
from cleanctl.errors import CleanctlError
from cleanctl.orphans.models import (
    InstalledApp,
    LeftoverCategory,
    LeftoverConfidence,
    LeftoverFile,
    developer_segment,
)
from cleanctl.orphans.registry import AppRegistry
from cleanctl.orphans.search_paths import SearchRoot
from cleanctl.safety.validator import get_size

logger = logging.getLogger(__name__)

REVERSE_DNS_PREFIXES: frozenset[str] = frozenset(
    {"com", "org", "net", "io", "co", "app", "me", "dev"}
)

_STRIPPED_SUFFIXES: tuple[str, ...] = (".plist", ".savedState", ".binarycookies")

_GROUP_PREFIX = "group."

# Names containing any of these belong to the operating system.
SYSTEM_ITEM_PATTERNS: tuple[str, ...] = (
    "apple",
    "macos",
    "icloud",
    "cloudd",
    "finder",
    "safari",
    "siri",
    "spotlight",
    "keychain",
    "itunes",
    "launchservices",
    "loginitems",
    "backgrounditems",
    "xcode",
    "coresimulator",
)

# Fuzzy matches shorter than this are too noisy to mean anything.
_MIN_FUZZY_LENGTH = 3

CategoryCallback = Callable[[str, LeftoverCategory, tuple[LeftoverFile, ...]], None]


class MatchStatus(str, Enum):
    """Outcome of classifying one candidate name.

    Attributes:
        OWNED: Belongs to an installed application.
        SYSTEM: Belongs to the operating system.
        ORPHAN: Leftover of an application that is no longer installed.
        UNRELATED: No owning-application signal at all.
    """

    OWNED = "owned"
    SYSTEM = "system"
    ORPHAN = "orphan"
    UNRELATED = "unrelated"


@dataclass(frozen=True, slots=True)
class TokenMatch:
    """Classification of a single candidate.

    Attributes:
        status: Match outcome.
        confidence: Confidence of the rule that fired (None if no app rule fired).
        related_bundle_id: Identifier of the suspected owning application.
    """

    status: MatchStatus
    confidence: LeftoverConfidence | None = None
    related_bundle_id: str | None = None


def _normalize(name: str) -> str:
    return name.lower().replace(" ", "")


def extract_token(name: str) -> str:
    """Derive an identifier-like token from a file or folder name.

    Strips well-known suffixes (``.plist``, ``.savedState``,
    ``.binarycookies``) and the ``group.`` prefix of group containers.

    Examples:
        >>> extract_token("com.example.Editor.plist")
        'com.example.Editor'
        >>> extract_token("group.com.example.shared")
        'com.example.shared'
    """
    token = name
    for suffix in _STRIPPED_SUFFIXES:
        if token.endswith(suffix):
            token = token[: -len(suffix)]
            break
    if token.startswith(_GROUP_PREFIX):
        token = token[len(_GROUP_PREFIX) :]
    return token


def is_reverse_dns(token: str) -> bool:
    """Check whether a token looks like a bundle identifier."""
    components = token.split(".")
    return len(components) >= 2 and components[0].lower() in REVERSE_DNS_PREFIXES


def extract_app_name(token: str) -> str:
    """Get the application-name part of a token.

    For reverse-DNS tokens this is the last segment; other tokens are
    returned unchanged.
    """
    if is_reverse_dns(token):
        return token.rsplit(".", 1)[-1]
    return token


def is_system_item(name: str) -> bool:
    """Check whether a name belongs to the operating system."""
    lowered = name.lower()
    return any(pattern in lowered for pattern in SYSTEM_ITEM_PATTERNS)


@dataclass(frozen=True, slots=True)
class AppIndex:
    """Immutable lookup tables built from one registry snapshot.

    Attributes:
        installed_ids: Lowercased identifiers of installed apps.
        installed_names: Normalized display names of installed apps.
        known_developers: Developer segment -> one identifier carrying it.
        known_names: Normalized app-name parts of known identifiers.
    """

    installed_ids: frozenset[str]
    installed_names: frozenset[str]
    known_developers: dict[str, str]
    known_names: frozenset[str]

    @classmethod
    def build(
        cls,
        installed: Iterable[InstalledApp],
        known_identifiers: Iterable[str] = (),
    ) -> "AppIndex":
        """Build the index from installed apps and remembered identifiers.

        Installed identifiers are always part of the known set.
        """
        apps = tuple(installed)
        known = sorted({app.bundle_identifier for app in apps} | set(known_identifiers))

        developers: dict[str, str] = {}
        for identifier in known:
            dev = developer_segment(identifier)
            if dev is not None and is_reverse_dns(identifier):
                developers.setdefault(dev, identifier)

        known_names = frozenset(
            _normalize(extract_app_name(identifier))
            for identifier in known
            if len(extract_app_name(identifier)) >= _MIN_FUZZY_LENGTH
        )

        return cls(
            installed_ids=frozenset(app.bundle_identifier.lower() for app in apps),
            installed_names=frozenset(_normalize(app.name) for app in apps if app.name.strip()),
            known_developers=developers,
            known_names=known_names,
        )


def classify_token(name: str, index: AppIndex) -> TokenMatch:
    """Classify one candidate name against the app index.

    Args:
        name: File or folder name found under a search root.
        index: Lookup tables of the current registry snapshot.

    Returns:
        TokenMatch describing the rule that fired.
    """
    token = extract_token(name)
    token_lower = token.lower()

    if token_lower in index.installed_ids or any(
        token_lower.startswith(installed + ".") for installed in index.installed_ids
    ):
        return TokenMatch(MatchStatus.OWNED, LeftoverConfidence.HIGH, token)

    normalized_name = _normalize(name)
    app_name = _normalize(extract_app_name(token))
    for installed_name in index.installed_names:
        if installed_name in normalized_name:
            return TokenMatch(MatchStatus.OWNED)
        if len(app_name) >= _MIN_FUZZY_LENGTH and app_name in installed_name:
            return TokenMatch(MatchStatus.OWNED)

    if is_system_item(name):
        return TokenMatch(MatchStatus.SYSTEM)

    reverse_dns = is_reverse_dns(token)
    if reverse_dns:
        dev = developer_segment(token)
        if dev is not None and dev in index.known_developers:
            return TokenMatch(MatchStatus.ORPHAN, LeftoverConfidence.MEDIUM, token)

    related = token if reverse_dns else None
    for dev in index.known_developers:
        if len(dev) >= _MIN_FUZZY_LENGTH and dev in normalized_name:
            return TokenMatch(MatchStatus.ORPHAN, LeftoverConfidence.LOW, related)

    if len(app_name) >= _MIN_FUZZY_LENGTH:
        for known_name in index.known_names:
            if app_name == known_name or app_name in known_name or known_name in app_name:
                return TokenMatch(MatchStatus.ORPHAN, LeftoverConfidence.LOW, related)

    return TokenMatch(MatchStatus.UNRELATED)


@dataclass(slots=True)
class OrphanScanResult:
    """Snapshot produced by one detector sweep.

    Attributes:
        leftovers: Reported leftovers, largest first.
        unreadable_roots: Roots that exist but could not be listed.
        cancelled: Whether the sweep stopped early.
    """

    leftovers: list[LeftoverFile] = field(default_factory=lambda: [])
    unreadable_roots: list[str] = field(default_factory=lambda: [])
    cancelled: bool = False

    @property
    def total_size(self) -> int:
        return sum(leftover.size_bytes for leftover in self.leftovers)

    def by_category(self) -> dict[LeftoverCategory, list[LeftoverFile]]:
        """Group leftovers by category, keeping size order within groups."""
        groups: dict[LeftoverCategory, list[LeftoverFile]] = {}
        for leftover in self.leftovers:
            groups.setdefault(leftover.category, []).append(leftover)
        return groups

    def at_least(self, confidence: LeftoverConfidence) -> list[LeftoverFile]:
        """Leftovers whose confidence is at least ``confidence``."""
        return [leftover for leftover in self.leftovers if leftover.confidence >= confidence]


@dataclass(frozen=True, slots=True)
class _RootResult:
    root: str
    category: LeftoverCategory
    leftovers: tuple[LeftoverFile, ...]
    readable: bool


class OrphanDetector:
    """Finds leftovers of uninstalled applications under search roots.

    The detector holds an immutable :class:`AppIndex`; it never reads the
    registry itself during a sweep. Roots are disjoint and read-only, so
    they are listed on a thread pool. Results are merged and published
    only from the calling thread.

    Args:
        installed: Snapshot of installed applications.
        known_identifiers: Identifiers of apps seen in earlier scans.
        max_workers: Thread pool size.
        measure_sizes: Compute leftover sizes (disable for quick sweeps).
    """

    def __init__(
        self,
        installed: Iterable[InstalledApp],
        *,
        known_identifiers: Iterable[str] = (),
        max_workers: int = 4,
        measure_sizes: bool = True,
    ) -> None:
        self._index = AppIndex.build(installed, known_identifiers)
        self._max_workers = max(1, max_workers)
        self._measure_sizes = measure_sizes

    @classmethod
    def from_registry(
        cls,
        registry: AppRegistry,
        *,
        known_identifiers: Iterable[str] = (),
        max_workers: int = 4,
    ) -> "OrphanDetector":
        """Create a detector from a registry snapshot."""
        return cls(registry.apps(), known_identifiers=known_identifiers, max_workers=max_workers)

    @property
    def index(self) -> AppIndex:
        return self._index

    def scan(
        self,
        roots: Iterable[SearchRoot],
        *,
        cancel_token: CancellationToken | None = None,
        on_category: CategoryCallback | None = None,
    ) -> OrphanScanResult:
        """Sweep all roots and collect leftovers.

        Args:
            roots: Ordered (root, category) pairs.
            cancel_token: Checked before each root is listed.
            on_category: Called from the calling thread once per completed
                root with that root's complete, immutable results.

        Returns:
            OrphanScanResult snapshot.
        """
        root_list = list(roots)
        completed: dict[int, _RootResult] = {}

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {
                executor.submit(self._scan_root, root, category, cancel_token): position
                for position, (root, category) in enumerate(root_list)
            }
            for future in as_completed(futures):
                root_result = future.result()
                if root_result is None:
                    continue
                completed[futures[future]] = root_result
                if on_category is not None:
                    on_category(root_result.root, root_result.category, root_result.leftovers)

        result = OrphanScanResult(cancelled=is_cancelled(cancel_token))
        for position in sorted(completed):
            root_result = completed[position]
            if not root_result.readable:
                result.unreadable_roots.append(root_result.root)
            result.leftovers.extend(root_result.leftovers)

        result.leftovers.sort(key=lambda leftover: leftover.size_bytes, reverse=True)
        logger.info(
            "Orphan sweep found %d leftover(s) in %d root(s)",
            len(result.leftovers),
            len(completed),
        )
        return result

    def classify(self, name: str) -> TokenMatch:
        """Classify a single name against this detector's snapshot."""
        return classify_token(name, self._index)

    def _scan_root(
        self,
        root: str,
        category: LeftoverCategory,
        cancel_token: CancellationToken | None,
    ) -> _RootResult | None:
        if is_cancelled(cancel_token):
            return None

        if not os.path.isdir(root):
            return _RootResult(root, category, (), readable=True)

        try:
            entries = sorted(os.listdir(root))
        except OSError as e:
            logger.warning("Cannot list leftover root %s: %s", root, e)
            return _RootResult(root, category, (), readable=False)

        leftovers: list[LeftoverFile] = []
        for name in entries:
            if name.startswith("."):
                continue

            match = classify_token(name, self._index)
            if match.status != MatchStatus.ORPHAN or match.confidence is None:
                continue

            path = os.path.join(root, name)
            leftovers.append(
                LeftoverFile(
                    path=path,
                    size_bytes=self._measure(path),
                    category=category,
                    confidence=match.confidence,
                    related_bundle_id=match.related_bundle_id,
                    mtime=_get_mtime(path),
                )
            )

        return _RootResult(root, category, tuple(leftovers), readable=True)

    def _measure(self, path: str) -> int:
        if not self._measure_sizes:
            return 0
        try:
            return get_size(path)
        except CleanctlError as e:
            logger.debug("Cannot measure leftover %s: %s", path, e)
            return 0


def _get_mtime(path: str) -> str | None:
    """Get last modification time as ISO 8601 string, or None on error."""
    try:
        st = os.lstat(path)
    except OSError:
        return None
    return datetime.fromtimestamp(st.st_mtime, tz=UTC).isoformat()
