from pathlib import Path
from typing import List, Optional

import typer

from hashtrack.config import ProjectConfig


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import hashtrack

        typer.echo(f"hashtrack version: {hashtrack.__version__}")
        raise typer.Exit()


app = typer.Typer(name="hashtrack")


@app.callback()
def app_callback(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Path of the digest store",
        envvar="HASHTRACK_DB_PATH",
    ),
    ignore: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        "-i",
        help="File extension to skip (repeatable), e.g. -i tmp -i log",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """hashtrack - record file digests and report what changed."""
    overrides = {}
    if db is not None:
        overrides["db_path"] = db
    if ignore:
        overrides["ignore_extensions"] = ignore
    ctx.obj = ProjectConfig(**overrides)


def get_config(ctx: typer.Context) -> ProjectConfig:
    """Config built by the app callback."""
    if isinstance(ctx.obj, ProjectConfig):
        return ctx.obj
    return ProjectConfig()
