"""Shared Rich display functions for deletion plans and results.

Provides the table builders used by the ``clean run`` and
``orphans clean`` commands.
"""

from rich.table import Table

from cleanctl.deletion.executor import DeletionResult, SizedPath
from cleanctl.utils.formatting import console, create_table, format_size, print_success


def create_plan_table(candidates: list[SizedPath], dry_run: bool = False) -> Table:
    """Create a table listing the paths about to be moved to the trash.

    Args:
        candidates: Paths scheduled for deletion.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table with one row per candidate.
    """
    title = "Planned Deletions (Dry Run)" if dry_run else "Planned Deletions"
    table = create_table(title)
    table.add_column("Path", style="item.path", overflow="fold")
    table.add_column("Size", style="item.size", justify="right")

    for candidate in candidates:
        table.add_row(candidate.path, format_size(candidate.size_bytes))

    return table


def create_errors_table(result: DeletionResult) -> Table:
    """Create a table listing the candidates that were not deleted."""
    table = create_table("Not Deleted")
    table.add_column("Status", width=6, justify="center")
    table.add_column("Path", overflow="fold")
    table.add_column("Reason", style="muted")

    for error in result.errors:
        table.add_row("[error]FAIL[/error]", error.path, error.reason)

    return table


def print_deletion_summary(result: DeletionResult) -> None:
    """Print the outcome of a deletion batch.

    Failed candidates are listed in a table; the summary line reports
    the counts and the freed space.

    Args:
        result: Result of the batch.
    """
    if result.errors:
        console.print(create_errors_table(result))

    verb = "Would move" if result.dry_run else "Moved"
    message = (
        f"{verb} {result.success_count} item(s) to the trash, "
        f"{format_size(result.freed_bytes)} freed"
    )
    if result.failed_count:
        console.print(f"[warning]{message}; {result.failed_count} failed[/]")
    else:
        print_success(message)
