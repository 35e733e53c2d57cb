"""Leftover detection for uninstalled applications.

This module provides the installed-application registry, the leftover
search roots, and the detector that classifies residue by confidence.
"""

from cleanctl.orphans.detector import (
    AppIndex,
    MatchStatus,
    OrphanDetector,
    OrphanScanResult,
    TokenMatch,
    classify_token,
    extract_token,
)
from cleanctl.orphans.models import (
    InstalledApp,
    LeftoverCategory,
    LeftoverConfidence,
    LeftoverFile,
)
from cleanctl.orphans.registry import AppRegistry, BundleAppRegistry, StaticAppRegistry
from cleanctl.orphans.search_paths import all_paths, system_library_paths, user_library_paths

__all__ = [
    "AppIndex",
    "AppRegistry",
    "BundleAppRegistry",
    "InstalledApp",
    "LeftoverCategory",
    "LeftoverConfidence",
    "LeftoverFile",
    "MatchStatus",
    "OrphanDetector",
    "OrphanScanResult",
    "StaticAppRegistry",
    "TokenMatch",
    "all_paths",
    "classify_token",
    "extract_token",
    "system_library_paths",
    "user_library_paths",
]
