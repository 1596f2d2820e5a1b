"""Status command for hashtrack CLI."""

import os
from pathlib import Path
from typing import Dict, Set

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

from hashtrack.cli.app import app, get_config
from hashtrack.config import ProjectConfig
from hashtrack.context import init_db, run
from hashtrack.sync import ScanError
from hashtrack.sync.utils import SyncReport

# Create rich console
console = Console()


def add_files_to_tree(
    tree: Tree, paths: Set[str], style: str, root: Path, checksums: Dict[str, str] = None
):
    """Add files to tree, grouped by directory."""
    by_dir = {}
    for path in sorted(paths):
        rel = Path(os.path.relpath(path, root))
        dir_name = rel.parent.as_posix() if rel.parent != Path(".") else ""
        by_dir.setdefault(dir_name, []).append((rel.name, path))

    for dir_name, files in sorted(by_dir.items()):
        if dir_name:
            branch = tree.add(f"[bold]{dir_name}/[/bold]")
        else:
            branch = tree

        for file_name, full_path in sorted(files):
            if checksums and full_path in checksums:
                checksum_short = checksums[full_path][:8]
                branch.add(f"[{style}]{file_name}[/{style}] ({checksum_short})")
            else:
                branch.add(f"[{style}]{file_name}[/{style}]")


def display_changes(title: str, changes: SyncReport, root: Path, verbose: bool = False):
    """Display changes using Rich for better visualization."""
    tree = Tree(title)

    if changes.total_changes == 0:
        tree.add("No changes")
        console.print(Panel(tree, expand=False))
        return

    if not verbose:
        # Compact display by top-level directory
        by_dir = {}
        for change_type, paths in [
            ("new", changes.new),
            ("modified", changes.modified),
            ("deleted", changes.deleted),
        ]:
            for path in paths:
                parts = Path(os.path.relpath(path, root)).parts
                dir_name = parts[0] + "/" if len(parts) > 1 else "./"
                by_dir.setdefault(dir_name, {"new": 0, "modified": 0, "deleted": 0})
                by_dir[dir_name][change_type] += 1

        for dir_name, counts in sorted(by_dir.items()):
            summary_parts = []
            if counts["new"]:
                summary_parts.append(f"[green]+{counts['new']} new[/green]")
            if counts["modified"]:
                summary_parts.append(f"[yellow]~{counts['modified']} modified[/yellow]")
            if counts["deleted"]:
                summary_parts.append(f"[red]-{counts['deleted']} deleted[/red]")

            tree.add(f"[bold]{dir_name}[/bold] {' '.join(summary_parts)}")

    else:
        # Show total counts
        summary = []
        if changes.new:
            summary.append(f"[green]{len(changes.new)} new[/green]")
        if changes.modified:
            summary.append(f"[yellow]{len(changes.modified)} modified[/yellow]")
        if changes.deleted:
            summary.append(f"[red]{len(changes.deleted)} deleted[/red]")
        tree.add(f"Found {', '.join(summary)}")

        if changes.new:
            new_branch = tree.add("[green]New Files[/green]")
            add_files_to_tree(new_branch, changes.new, "green", root, changes.checksums)

        if changes.modified:
            mod_branch = tree.add("[yellow]Modified[/yellow]")
            add_files_to_tree(mod_branch, changes.modified, "yellow", root, changes.checksums)

        if changes.deleted:
            del_branch = tree.add("[red]Deleted[/red]")
            add_files_to_tree(del_branch, changes.deleted, "red", root)

    console.print(Panel(tree, expand=False))


async def run_status(config: ProjectConfig, directory: Path, verbose: bool = False) -> SyncReport:
    """Check digests on disk against the store without writing."""
    async with init_db(config) as ctx:
        changes = await ctx.scanner.find_changes(directory)
    display_changes(str(directory), changes, directory, verbose)
    return changes


@app.command()
def status(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory to check."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed file information"),
):
    """Show what changed since the last sync, without recording anything."""
    config = get_config(ctx)
    try:
        run(run_status(config, directory.resolve(), verbose))
    except ScanError as e:
        logger.error(str(e))
        typer.echo(f"Scan aborted: {e}", err=True)
        raise typer.Exit(1)
    except Exception as e:
        logger.error(f"Error checking status: {e}")
        typer.echo(f"Error checking status: {e}", err=True)
        raise typer.Exit(1)
