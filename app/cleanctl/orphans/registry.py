"""Installed-application registry.

The registry is an external collaborator of the orphan detector: it
enumerates the applications currently installed. The default
implementation reads ``Info.plist`` files of ``.app`` bundles; a static
registry is provided for callers that already hold a snapshot.

Identifiers seen in earlier scans are remembered in the state directory,
so leftovers of apps that have since been removed can still be tied to
their developer.
"""

import json
import logging
import os
import plistlib
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from cleanctl.core.paths import ensure_state_dir, get_state_dir
from cleanctl.errors import CleanctlError
from cleanctl.orphans.models import InstalledApp
from cleanctl.safety.validator import get_size

logger = logging.getLogger(__name__)

DEFAULT_APPLICATION_DIRS: tuple[str, ...] = ("/Applications", "~/Applications")

KNOWN_APPS_FILENAME = "known-apps.json"


class AppRegistry(ABC):
    """Read-only source of installed applications."""

    @abstractmethod
    def apps(self) -> tuple[InstalledApp, ...]:
        """Enumerate installed applications.

        Returns:
            Tuple of InstalledApp, one per unique bundle identifier.
        """

    def bundle_identifiers(self) -> frozenset[str]:
        """Get the identifiers of all installed applications."""
        return frozenset(app.bundle_identifier for app in self.apps())

    def names(self) -> frozenset[str]:
        """Get the display names of all installed applications."""
        return frozenset(app.name for app in self.apps())


class StaticAppRegistry(AppRegistry):
    """Registry backed by a fixed list of applications."""

    def __init__(self, apps: Iterable[InstalledApp]) -> None:
        self._apps = tuple(dict.fromkeys(apps))

    def apps(self) -> tuple[InstalledApp, ...]:
        return self._apps


class BundleAppRegistry(AppRegistry):
    """Registry that reads ``.app`` bundles from application folders.

    Args:
        application_dirs: Folders to search. ``~`` is expanded.
        measure_size: Compute bundle sizes (slow for large bundles).
    """

    def __init__(
        self,
        application_dirs: Iterable[str] = DEFAULT_APPLICATION_DIRS,
        *,
        measure_size: bool = False,
    ) -> None:
        self._dirs = tuple(os.path.expanduser(d) for d in application_dirs)
        self._measure_size = measure_size
        self._cache: tuple[InstalledApp, ...] | None = None

    def apps(self) -> tuple[InstalledApp, ...]:
        """Enumerate ``.app`` bundles (cached per registry instance)."""
        if self._cache is not None:
            return self._cache

        found: dict[str, InstalledApp] = {}
        for directory in self._dirs:
            try:
                entries = sorted(os.listdir(directory))
            except OSError as e:
                logger.debug("Cannot list application folder %s: %s", directory, e)
                continue

            for entry in entries:
                if not entry.endswith(".app"):
                    continue
                app = self._read_bundle(os.path.join(directory, entry))
                if app is not None:
                    found.setdefault(app.bundle_identifier, app)

        self._cache = tuple(found.values())
        return self._cache

    def _read_bundle(self, bundle_path: str) -> InstalledApp | None:
        """Read an application bundle's Info.plist.

        Args:
            bundle_path: Path to the ``.app`` bundle.

        Returns:
            InstalledApp, or None when the bundle has no identifier.
        """
        plist_path = os.path.join(bundle_path, "Contents", "Info.plist")
        try:
            with open(plist_path, "rb") as f:
                info = plistlib.load(f)
        except (OSError, plistlib.InvalidFileException, ValueError) as e:
            logger.debug("Cannot read %s: %s", plist_path, e)
            return None

        bundle_id = info.get("CFBundleIdentifier")
        if not isinstance(bundle_id, str) or not bundle_id:
            return None

        fallback_name = os.path.basename(bundle_path).removesuffix(".app")
        name = info.get("CFBundleName") or fallback_name
        version = info.get("CFBundleShortVersionString")

        size = 0
        if self._measure_size:
            try:
                size = get_size(bundle_path)
            except CleanctlError as e:
                logger.debug("Cannot measure %s: %s", bundle_path, e)

        return InstalledApp(
            name=str(name),
            bundle_identifier=bundle_id,
            path=bundle_path,
            version=str(version) if version is not None else None,
            size_bytes=size,
        )


def get_known_apps_path() -> Path:
    """Get the path of the remembered identifiers file.

    Returns:
        Path to ~/.local/state/cleanctl/known-apps.json.
    """
    return get_state_dir() / KNOWN_APPS_FILENAME


def load_known_identifiers(path: Path | None = None) -> frozenset[str]:
    """Load identifiers remembered from earlier scans.

    A missing or corrupt file yields an empty set.
    """
    known_path = path or get_known_apps_path()
    try:
        data = json.loads(known_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return frozenset()
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable known apps file %s: %s", known_path, e)
        return frozenset()

    if not isinstance(data, list):
        logger.warning("Ignoring malformed known apps file %s", known_path)
        return frozenset()
    return frozenset(item for item in data if isinstance(item, str) and item)


def remember_identifiers(identifiers: Iterable[str], path: Path | None = None) -> frozenset[str]:
    """Merge identifiers into the remembered set and persist it.

    Args:
        identifiers: Identifiers of currently installed applications.
        path: Override for the known apps file.

    Returns:
        The merged set of remembered identifiers.

    Raises:
        RuntimeError: If the state directory cannot be created.
        OSError: If the file cannot be written.
    """
    known_path = path or get_known_apps_path()
    merged = load_known_identifiers(known_path) | frozenset(identifiers)

    if path is None:
        ensure_state_dir()
    else:
        known_path.parent.mkdir(parents=True, exist_ok=True)

    known_path.write_text(json.dumps(sorted(merged), indent=2), encoding="utf-8")
    return merged
