"""Watch command for hashtrack CLI."""

from pathlib import Path

import typer
from loguru import logger

from hashtrack.cli.app import app, get_config
from hashtrack.config import ProjectConfig
from hashtrack.context import init_db, run
from hashtrack.sync import ScanError
from hashtrack.sync.watch_service import WatchService


async def run_watch(config: ProjectConfig, directory: Path):
    async with init_db(config) as ctx:
        watch_service = WatchService(
            sync_service=ctx.sync_service,
            config=config,
            directory=directory,
            shutdown=ctx.shutdown,
        )
        await watch_service.run()


@app.command()
def watch(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory to watch."),
):
    """Sync a directory, then keep it synced as files change. Stop with Ctrl+C."""
    config = get_config(ctx)
    try:
        run(run_watch(config, directory.resolve()))
    except ScanError as e:
        logger.error(str(e))
        typer.echo(f"Scan aborted: {e}", err=True)
        raise typer.Exit(1)
    except Exception as e:
        if not isinstance(e, typer.Exit):
            logger.exception("Watch failed")
            typer.echo(f"Error during watch: {e}", err=True)
            raise typer.Exit(1)
        raise
