"""Disk cleanup commands.

Provides commands to list cleanable caches, logs and trash contents, and
to move the selected items to the trash.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from cleanctl.cleanup.catalog import all_definitions, safe_definitions
from cleanctl.cleanup.expander import CleanupScanner, CleanupScanResult
from cleanctl.cleanup.models import CleanableItem, CleanupCategory, CleanupPathDefinition
from cleanctl.cli.display import create_plan_table, print_deletion_summary
from cleanctl.cli.types import OutputFormat, category_slug, parse_categories, require_config
from cleanctl.core.state import StateManager
from cleanctl.deletion.executor import DeletionExecutor
from cleanctl.models.history import HistoryActionType
from cleanctl.utils.formatting import (
    console,
    create_table,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Find and clean caches, logs and trash.",
    invoke_without_command=True,
    no_args_is_help=True,
)

CategoryOption = Annotated[
    list[str] | None,
    typer.Option(
        "--category",
        "-c",
        help="Only this category (repeatable), e.g. user-caches.",
    ),
]


@app.command()
def scan(
    category: CategoryOption = None,
    include_all: Annotated[
        bool,
        typer.Option("--all", help="Include locations that are not cleaned by default."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    export_path: Annotated[
        Path | None,
        typer.Option(
            "--export",
            "-e",
            help="Export results to JSON file.",
        ),
    ] = None,
) -> None:
    """List cleanable items grouped by category."""
    config = require_config()
    result = _run_scan(parse_categories(category), include_all, config.max_workers)

    if not result.groups:
        print_success("Nothing to clean.")
        return

    if export_path is not None:
        _export_results(result, export_path)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(_result_to_dict(result)))
        return

    _print_groups(result)
    console.print(
        f"\n[dim]Found {len(result.items)} item(s), {format_size(result.total_size)} total[/dim]"
    )
    if result.issues:
        print_warning(f"{len(result.issues)} path(s) could not be measured (use -v for details)")


@app.command()
def run(
    category: CategoryOption = None,
    include_deselected: Annotated[
        bool,
        typer.Option(
            "--include-deselected",
            help="Also clean items that are not selected by default.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be moved to the trash."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Move cleanable items to the trash."""
    config = require_config()
    dry_run = dry_run or config.dry_run

    result = _run_scan(parse_categories(category), False, config.max_workers)
    items = [item for item in result.items if item.is_selected or include_deselected]

    if not items:
        print_info("Nothing to clean.")
        return

    console.print(create_plan_table(list(items), dry_run=dry_run))
    total = sum(item.size_bytes for item in items)

    if not dry_run and not yes:
        confirmed = typer.confirm(
            f"\nMove {len(items)} item(s) ({format_size(total)}) to the trash?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    executor = DeletionExecutor(dry_run=dry_run)
    deletion = executor.execute(items)
    print_deletion_summary(deletion)

    try:
        entry = StateManager().record_batch(
            HistoryActionType.CLEAN, items, deletion, command="cleanctl clean run"
        )
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not record to history: {e}")
    else:
        if entry is not None:
            print_info("Deletions recorded to history.")

    if deletion.failed_count:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _run_scan(
    categories: list[CleanupCategory] | None,
    include_all: bool,
    max_workers: int,
) -> CleanupScanResult:
    """Scan the catalog, optionally restricted to some categories."""
    definitions: tuple[CleanupPathDefinition, ...] = (
        all_definitions() if include_all else safe_definitions()
    )
    if categories is not None:
        definitions = tuple(d for d in definitions if d.category in categories)

    scanner = CleanupScanner(definitions, max_workers=max_workers)
    with console.status("Scanning cleanup locations..."):
        return scanner.scan()


def _print_groups(result: CleanupScanResult) -> None:
    """Display one table row per item, grouped by category."""
    table = create_table("Cleanable Items")
    table.add_column("Category", no_wrap=True)
    table.add_column("", width=2, justify="center")
    table.add_column("Path", style="item.path", overflow="fold")
    table.add_column("Size", style="item.size", justify="right")

    for group in result.groups:
        for index, item in enumerate(group.items):
            label = f"[header]{group.category.value}[/]" if index == 0 else ""
            mark = "[success]●[/]" if item.is_selected else "[muted]○[/]"
            table.add_row(label, mark, item.path, format_size(item.size_bytes))
        table.add_row(
            "",
            "",
            f"[muted]{group.selected_count} of {len(group.items)} selected[/]",
            f"[bold]{format_size(group.total_size)}[/]",
            end_section=True,
        )

    console.print(table)


def _item_to_dict(item: CleanableItem) -> dict[str, Any]:
    return {
        "path": item.path,
        "name": item.name,
        "size_bytes": item.size_bytes,
        "category": category_slug(item.category),
        "selected": item.is_selected,
    }


def _result_to_dict(result: CleanupScanResult) -> dict[str, Any]:
    return {
        "total_size": result.total_size,
        "groups": [
            {
                "category": category_slug(group.category),
                "label": group.category.value,
                "total_size": group.total_size,
                "items": [_item_to_dict(item) for item in group.items],
            }
            for group in result.groups
        ],
        "issues": [{"path": issue.path, "reason": issue.reason} for issue in result.issues],
    }


def _export_results(result: CleanupScanResult, export_path: Path) -> None:
    """Export scan results to a JSON file."""
    export_path = export_path.resolve()
    if export_path.is_dir():
        print_error(f"Export path is a directory: {export_path}")
        raise typer.Exit(code=1)

    try:
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(json.dumps(_result_to_dict(result), indent=2))
        print_info(f"Results exported to {export_path}")
    except OSError as e:
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e
