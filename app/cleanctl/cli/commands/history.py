"""History command for viewing past deletion batches.

This module provides the `cleanctl history` command, which lists what
was moved to the trash and when.
"""

import json
from datetime import datetime
from typing import Annotated

import typer

from cleanctl.core.state import StateManager
from cleanctl.models.history import HistoryEntry
from cleanctl.utils.formatting import console, create_table, format_size, print_info

app = typer.Typer(
    name="history",
    help="View history of deletion batches.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show past deletion batches.

    Examples:
        cleanctl history            # Show last 20 entries
        cleanctl history -n 50      # Show last 50 entries
        cleanctl history --json     # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    entries = StateManager().get_history(limit=limit)
    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        console.print(json.dumps([entry.to_dict() for entry in entries], indent=2))
    else:
        _print_table(entries)


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as a Rich table."""
    table = create_table("Deletion History")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp")
    table.add_column("Action", style="info")
    table.add_column("Paths")
    table.add_column("Freed", style="item.size", justify="right")
    table.add_column("Failed", justify="right")

    for entry in entries:
        count = len(entry.items)
        names = ", ".join(item.path.rsplit("/", 1)[-1] for item in entry.items[:3])
        if count > 3:
            names += f" (+{count - 3} more)"

        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            entry.action_type.value,
            names,
            format_size(entry.freed_bytes),
            str(entry.failed_count) if entry.failed_count else "-",
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")
