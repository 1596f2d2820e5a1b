"""Command module for hashtrack sync operations."""

import os
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.tree import Tree

from hashtrack.cli.app import app, get_config
from hashtrack.config import ProjectConfig
from hashtrack.context import init_db, run
from hashtrack.sync import ScanError
from hashtrack.sync.utils import SyncReport

console = Console()


def relative(path: str, root: Path) -> str:
    return os.path.relpath(path, root)


def display_sync_summary(report: SyncReport):
    """Display a one-line summary of sync changes."""
    total_changes = report.total_changes
    if total_changes == 0:
        console.print("[green]Everything up to date[/green]")
        return

    # Format as: "Synced X files (A new, B modified, C deleted)"
    changes = []
    new_count = len(report.new)
    mod_count = len(report.modified)
    del_count = len(report.deleted)

    if new_count:
        changes.append(f"[green]{new_count} new[/green]")
    if mod_count:
        changes.append(f"[yellow]{mod_count} modified[/yellow]")
    if del_count:
        changes.append(f"[red]{del_count} deleted[/red]")

    console.print(f"Synced {total_changes} files ({', '.join(changes)})")


def display_detailed_sync_results(report: SyncReport, root: Path):
    """Display detailed sync results with trees."""
    if report.total_changes == 0:
        console.print("\n[green]Everything up to date[/green]")
        return

    console.print("\n[bold]Sync Results[/bold]")

    tree = Tree(f"[bold]{root}[/bold]")
    if report.new:
        created = tree.add("[green]New[/green]")
        for path in sorted(report.new):
            checksum = report.checksums.get(path, "")
            created.add(f"[green]{relative(path, root)}[/green] ({checksum[:8]})")
    if report.modified:
        modified = tree.add("[yellow]Modified[/yellow]")
        for path in sorted(report.modified):
            checksum = report.checksums.get(path, "")
            modified.add(f"[yellow]{relative(path, root)}[/yellow] ({checksum[:8]})")
    if report.deleted:
        deleted = tree.add("[red]Deleted[/red]")
        for path in sorted(report.deleted):
            deleted.add(f"[red]{relative(path, root)}[/red]")
    console.print(tree)


async def run_sync(config: ProjectConfig, directory: Path, verbose: bool = False) -> SyncReport:
    """Run sync operation."""
    async with init_db(config) as ctx:
        report = await ctx.sync_service.sync(directory)

    if verbose:
        display_detailed_sync_results(report, directory)
    else:
        display_sync_summary(report)
    return report


@app.command()
def sync(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory to record digests for."),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed sync information.",
    ),
) -> None:
    """Record digests for a directory and report new, modified and deleted files."""
    config = get_config(ctx)
    try:
        run(run_sync(config, directory.resolve(), verbose))
    except ScanError as e:
        logger.error(str(e))
        typer.echo(f"Scan aborted: {e}", err=True)
        raise typer.Exit(1)
    except Exception as e:
        if not isinstance(e, typer.Exit):
            logger.exception("Sync failed")
            typer.echo(f"Error during sync: {e}", err=True)
            raise typer.Exit(1)
        raise
