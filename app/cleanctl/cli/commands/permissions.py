"""Folder permission commands.

Provides the command that probes which cleanup locations are readable.
"""

from typing import Annotated

import typer

from cleanctl.cli.types import require_config
from cleanctl.permissions.catalog import build_categories
from cleanctl.permissions.models import FolderAccessStatus, PermissionCategoryState
from cleanctl.permissions.probe import PermissionProbe, has_full_disk_access
from cleanctl.utils.formatting import (
    console,
    create_table,
    format_access_status,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Check access to cleanup locations.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def check(
    full: Annotated[
        bool,
        typer.Option(
            "--full",
            help="Also probe folders that may show a macOS consent dialog.",
        ),
    ] = False,
) -> None:
    """Probe folder access and show the status per category."""
    config = require_config()
    categories = build_categories()
    probe = PermissionProbe(max_workers=config.max_workers)

    with console.status("Checking folder access..."):
        if full:
            probe.full_pass(categories)
        else:
            probe.startup_pass(categories)

    _print_categories(categories)

    if has_full_disk_access():
        print_success("Full disk access is granted.")
    else:
        print_warning(
            "Full disk access is not granted. Enable it for your terminal in "
            "System Settings > Privacy & Security > Full Disk Access."
        )

    if not full and any(
        folder.status == FolderAccessStatus.UNCHECKED
        for category in categories
        for folder in category.folders
    ):
        print_info("Some folders were not checked. Run with --full to probe them.")


def _print_categories(categories: list[PermissionCategoryState]) -> None:
    """Display one row per folder, grouped by category."""
    table = create_table("Folder Access")
    table.add_column("Category", no_wrap=True)
    table.add_column("Folder")
    table.add_column("Path", style="muted", overflow="fold")
    table.add_column("Status", justify="center")

    for category in categories:
        summary = f"{format_access_status(category.overall_status)} {category.status_summary}"
        table.add_row(f"[header]{category.type.label}[/]", "", "", summary)
        for index, folder in enumerate(category.folders):
            table.add_row(
                "",
                folder.display_name,
                folder.path,
                format_access_status(folder.status),
                end_section=index == len(category.folders) - 1,
            )

    console.print(table)
