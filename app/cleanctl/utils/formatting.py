"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from cleanctl.core.theme import get_theme
from cleanctl.orphans.models import LeftoverConfidence
from cleanctl.permissions.models import FolderAccessStatus


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())

_CONFIDENCE_STYLES: dict[LeftoverConfidence, str] = {
    LeftoverConfidence.HIGH: "confidence_high",
    LeftoverConfidence.MEDIUM: "confidence_medium",
    LeftoverConfidence.LOW: "confidence_low",
}

_ACCESS_STYLES: dict[FolderAccessStatus, str] = {
    FolderAccessStatus.ACCESSIBLE: "access_granted",
    FolderAccessStatus.DENIED: "access_denied",
    FolderAccessStatus.NOT_EXISTS: "access_missing",
    FolderAccessStatus.CHECKING: "access_pending",
    FolderAccessStatus.UNCHECKED: "muted",
}


def format_size(size_bytes: int | None) -> str:
    """Return a human-readable size string."""
    if size_bytes is None:
        return "unknown"

    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def format_confidence(confidence: LeftoverConfidence) -> str:
    """Format a leftover confidence with color markup."""
    style = _CONFIDENCE_STYLES[confidence]
    return f"[{style}]{confidence.value}[/]"


def format_access_status(status: FolderAccessStatus) -> str:
    """Format a folder access status with color markup."""
    style = _ACCESS_STYLES[status]
    return f"[{style}]{status.label}[/]"


def create_table(title: str) -> Table:
    """Create a table with the shared header and border styles."""
    return Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
