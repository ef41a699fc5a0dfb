"""
Rendering functions for releaser output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import Optional

from .domain.operation import SyncOutcome
from .domain.release_index import ReleaseIndex
from .versioning import SortKey, group_sort_key, version_sort_key

console = Console(stderr=True)


def render_catalog_table(
    index: ReleaseIndex,
    title: Optional[str] = "Release Catalog",
    group_key: SortKey = group_sort_key,
    version_key: SortKey = version_sort_key
) -> None:
    """
    Render the catalog as a table, one row per archive.

    Args:
        index: Release index to display
        title: Optional table title
        group_key: Sort key for groups
        version_key: Sort key for versions
    """
    if not len(index):
        console.print("[yellow]No archives found.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Group", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Archive", style="dim")

    for record in index.records(group_key, version_key):
        table.add_row(record.group_key, record.version, record.canonical_name)

    console.print(table)

    if index.duplicates:
        console.print(f"\n[yellow]Duplicate releases ({len(index.duplicates)}):[/yellow]")
        for dup in index.duplicates:
            console.print(f"  [yellow]•[/yellow] {dup.group_key}/{dup.version}: {dup.previous} -> {dup.replacement}")


def render_sync_summary(outcome: SyncOutcome) -> None:
    """Render a sync outcome as a summary table."""
    mode = "[bold yellow]DRY RUN[/bold yellow] " if outcome.dry_run else ""

    table = Table(title=f"{mode}Sync Summary", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("State", outcome.state.value)
    table.add_row("Archives indexed", str(outcome.archives_indexed))
    table.add_row("New versions", ", ".join(outcome.new_versions) or "-")
    table.add_row("Committed", "yes" if outcome.committed else "no")
    table.add_row("Branch pushed", "yes" if outcome.pushed else "no")
    table.add_row("Tags created", ", ".join(outcome.tags_created) or "-")
    table.add_row("Tags pushed", "yes" if outcome.tags_pushed else "no")

    console.print(table)

    if outcome.error:
        stage = outcome.failed_state.value if outcome.failed_state else "unknown"
        console.print(f"\n[red]Failed after {stage}:[/red] {outcome.error}")
    elif outcome.tags_created and not outcome.dry_run:
        console.print(f"\n[bold green]✓[/bold green] Released {len(outcome.tags_created)} versions")
