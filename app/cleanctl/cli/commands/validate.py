"""Path validation command.

Shows how the safety policy judges arbitrary paths without touching them.
"""

from typing import Annotated

import typer

from cleanctl.safety.validator import ValidationKind, validate_batch
from cleanctl.utils.formatting import console, create_table


def validate_paths(
    paths: Annotated[
        list[str],
        typer.Argument(help="Paths to check against the safety policy."),
    ],
) -> None:
    """Show whether each path may be moved to the trash.

    Exits with code 1 if any path is not safe.
    """
    results = validate_batch(paths)

    table = create_table("Validation")
    table.add_column("Path", overflow="fold")
    table.add_column("Result", justify="center")
    table.add_column("Reason", style="muted")

    for path, result in results:
        if result.is_valid:
            verdict = "[success]safe[/success]"
        elif result.kind == ValidationKind.OUTSIDE_ALLOWED_PATHS:
            verdict = "[warning]rejected[/warning]"
        else:
            verdict = "[error]rejected[/error]"
        table.add_row(path, verdict, "" if result.is_valid else result.reason)

    console.print(table)

    if any(not result.is_valid for _, result in results):
        raise typer.Exit(code=1)
