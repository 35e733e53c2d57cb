"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules.
"""

from enum import Enum

import typer

from cleanctl.cleanup.models import CleanupCategory
from cleanctl.core.config import CleanerConfig, ConfigError, load_config
from cleanctl.orphans.models import LeftoverConfidence
from cleanctl.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options for scan commands."""

    TABLE = "table"
    JSON = "json"


class ConfidenceChoice(str, Enum):
    """Minimum leftover confidence accepted on the command line."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def to_confidence(self) -> LeftoverConfidence:
        return LeftoverConfidence(self.value)


def category_slug(category: CleanupCategory) -> str:
    """Command-line name of a category (e.g. "user-caches")."""
    return category.name.lower().replace("_", "-")


def parse_categories(values: list[str] | None) -> list[CleanupCategory] | None:
    """Parse ``--category`` values.

    Accepts the slug ("xcode-derived-data") or the label
    ("Xcode Derived Data"), case-insensitively.

    Raises:
        typer.BadParameter: If a value names no category.
    """
    if not values:
        return None

    lookup: dict[str, CleanupCategory] = {}
    for category in CleanupCategory:
        lookup[category_slug(category)] = category
        lookup[category.value.lower()] = category

    parsed: list[CleanupCategory] = []
    for value in values:
        category = lookup.get(value.strip().lower())
        if category is None:
            choices = ", ".join(category_slug(c) for c in CleanupCategory)
            msg = f"Unknown category '{value}'. Choose from: {choices}"
            raise typer.BadParameter(msg, param_hint="--category")
        parsed.append(category)
    return parsed


def require_config() -> CleanerConfig:
    """Load the configuration or exit with code 1.

    Returns:
        Loaded CleanerConfig (defaults when there is no config file).

    Raises:
        typer.Exit: If the config file is invalid.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
