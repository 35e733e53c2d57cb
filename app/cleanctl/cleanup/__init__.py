"""Cleanup catalog and pattern expansion.

This module provides the static catalog of cleanup locations, the
cleanable item models and the scanner that turns patterns into measured
targets.
"""

from cleanctl.cleanup.catalog import (
    CLEANUP_PATHS,
    all_definitions,
    definitions_for,
    safe_definitions,
)
from cleanctl.cleanup.expander import CleanupScanner, CleanupScanResult, ScanIssue, expand_pattern
from cleanctl.cleanup.models import (
    CleanableItem,
    CleanupCategory,
    CleanupGroup,
    CleanupPathDefinition,
)

__all__ = [
    "CLEANUP_PATHS",
    "CleanableItem",
    "CleanupCategory",
    "CleanupGroup",
    "CleanupPathDefinition",
    "CleanupScanResult",
    "CleanupScanner",
    "ScanIssue",
    "all_definitions",
    "definitions_for",
    "expand_pattern",
    "safe_definitions",
]
