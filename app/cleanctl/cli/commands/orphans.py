"""Application leftover commands.

Provides commands to find files left behind by uninstalled applications
and to move them to the trash.
"""

import json
from typing import Annotated, Any

import typer

from cleanctl.cli.display import create_plan_table, print_deletion_summary
from cleanctl.cli.types import ConfidenceChoice, OutputFormat, require_config
from cleanctl.core.config import CleanerConfig
from cleanctl.core.state import StateManager
from cleanctl.deletion.executor import DeletionExecutor
from cleanctl.models.history import HistoryActionType
from cleanctl.orphans.detector import OrphanDetector, OrphanScanResult
from cleanctl.orphans.models import LeftoverFile
from cleanctl.orphans.registry import (
    BundleAppRegistry,
    load_known_identifiers,
    remember_identifiers,
)
from cleanctl.orphans.search_paths import all_paths
from cleanctl.utils.formatting import (
    console,
    create_table,
    format_confidence,
    format_size,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Find and clean leftovers of uninstalled applications.",
    invoke_without_command=True,
    no_args_is_help=True,
)

SystemOption = Annotated[
    bool | None,
    typer.Option(
        "--system/--no-system",
        help="Also search /Library (default from config).",
    ),
]

MinConfidenceOption = Annotated[
    ConfidenceChoice,
    typer.Option(
        "--min-confidence",
        help="Only show leftovers with at least this confidence.",
        case_sensitive=False,
    ),
]


@app.command()
def scan(
    system: SystemOption = None,
    min_confidence: MinConfidenceOption = ConfidenceChoice.LOW,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List leftovers grouped by category."""
    config = require_config()
    result = _detect(config, system)
    leftovers = result.at_least(min_confidence.to_confidence())

    for root in result.unreadable_roots:
        print_warning(f"Cannot read {root} (see `cleanctl permissions check`)")

    if not leftovers:
        print_success("No application leftovers found.")
        return

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([_leftover_to_dict(leftover) for leftover in leftovers]))
        return

    _print_leftovers(leftovers)
    total = sum(leftover.size_bytes for leftover in leftovers)
    console.print(f"\n[dim]Found {len(leftovers)} leftover(s), {format_size(total)} total[/dim]")


@app.command()
def clean(
    system: SystemOption = None,
    min_confidence: MinConfidenceOption = ConfidenceChoice.HIGH,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be moved to the trash."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Move leftovers to the trash."""
    config = require_config()
    dry_run = dry_run or config.dry_run
    leftovers = _detect(config, system).at_least(min_confidence.to_confidence())

    if not leftovers:
        print_info("No application leftovers to clean.")
        return

    console.print(create_plan_table(list(leftovers), dry_run=dry_run))

    if not dry_run and not yes:
        total = sum(leftover.size_bytes for leftover in leftovers)
        confirmed = typer.confirm(
            f"\nMove {len(leftovers)} leftover(s) ({format_size(total)}) to the trash?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    deletion = DeletionExecutor(dry_run=dry_run).execute(leftovers)
    print_deletion_summary(deletion)

    try:
        entry = StateManager().record_batch(
            HistoryActionType.ORPHAN_CLEAN, leftovers, deletion, command="cleanctl orphans clean"
        )
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not record to history: {e}")
    else:
        if entry is not None:
            print_info("Deletions recorded to history.")

    if deletion.failed_count:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _detect(config: CleanerConfig, system: bool | None) -> OrphanScanResult:
    """Snapshot the installed apps and sweep the leftover roots."""
    include_system = config.include_system_paths if system is None else system
    registry = BundleAppRegistry(config.application_dirs)

    installed = registry.apps()
    try:
        known = remember_identifiers(app.bundle_identifier for app in installed)
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not update known apps: {e}")
        known = load_known_identifiers()

    detector = OrphanDetector(
        installed,
        known_identifiers=known,
        max_workers=config.max_workers,
    )
    with console.status("Searching for leftovers..."):
        return detector.scan(all_paths(include_system=include_system))


def _print_leftovers(leftovers: list[LeftoverFile]) -> None:
    """Display leftovers grouped by category."""
    table = create_table("Application Leftovers")
    table.add_column("Category", no_wrap=True)
    table.add_column("Path", style="item.path", overflow="fold")
    table.add_column("Size", style="item.size", justify="right")
    table.add_column("Confidence", justify="center")
    table.add_column("App", style="muted")

    by_category: dict[str, list[LeftoverFile]] = {}
    for leftover in leftovers:
        by_category.setdefault(leftover.category.value, []).append(leftover)

    for label, group in by_category.items():
        for index, leftover in enumerate(group):
            table.add_row(
                f"[header]{label}[/]" if index == 0 else "",
                leftover.path,
                format_size(leftover.size_bytes),
                format_confidence(leftover.confidence),
                leftover.related_bundle_id or "-",
                end_section=index == len(group) - 1,
            )

    console.print(table)


def _leftover_to_dict(leftover: LeftoverFile) -> dict[str, Any]:
    return {
        "path": leftover.path,
        "size_bytes": leftover.size_bytes,
        "category": leftover.category.value,
        "confidence": leftover.confidence.value,
        "related_bundle_id": leftover.related_bundle_id,
        "mtime": leftover.mtime,
    }
