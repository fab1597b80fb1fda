"""Command-line access to a storage backend."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.markup import escape
from rich.table import Table

from .services.config import AppConfig, get_config
from .services.folder_summary import update_folder_summary
from .services.storage import StorageBackend, StorageError, create_storage

logger = logging.getLogger(__name__)

APP_HELP = """
Browse and maintain the chat document store.

Paths are logical, '/'-separated and rooted at '/'. Folders carry their own
index document; 'summarize' regenerates it from the folder's children.
"""

app = typer.Typer(name="storage-cli", help=APP_HELP, no_args_is_help=True)


@app.callback()
def main(
    ctx: typer.Context,
    storage_type: Optional[str] = typer.Option(
        None, "--storage-type", "-t", help="'memory' or 'filesystem'. Defaults to STORAGE_TYPE."
    ),
    data_path: Optional[Path] = typer.Option(
        None, "--data-path", "-d", help="Base directory of the filesystem backend."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
):
    logging.basicConfig(level=logging.DEBUG if verbose else get_config().log_level)
    ctx.obj = {"storage_type": storage_type, "data_path": data_path}


async def _open(options: dict) -> StorageBackend:
    config = get_config()
    if options["data_path"] is not None:
        config = AppConfig(
            storage_type=config.storage_type,
            data_store_path=options["data_path"],
            log_level=config.log_level,
            cors_origins=config.cors_origins,
        )
    return await create_storage(options["storage_type"], config)


def _run(coro):
    try:
        return asyncio.run(coro)
    except (StorageError, ValueError) as exc:
        print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1)


@app.command("ls")
def list_folder(
    ctx: typer.Context,
    path: str = typer.Argument("/", help="Folder to list"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List the children of a folder."""

    async def do_list():
        storage = await _open(ctx.obj)
        return await storage.list_nodes(path)

    nodes = _run(do_list())

    if json_output:
        typer.echo(json.dumps([node.model_dump() for node in nodes], indent=2))
        return

    if not nodes:
        print(f"[dim]{escape(path)} is empty[/dim]")
        return

    table = Table(title=path)
    table.add_column("Type", style="magenta")
    table.add_column("Path", style="cyan")
    table.add_column("Title")
    for node in nodes:
        title = (node.metadata or {}).get("title", "")
        table.add_row(node.type, escape(node.name), escape(str(title)))
    print(table)


@app.command("cat")
def show_content(ctx: typer.Context, path: str = typer.Argument(..., help="Node to read")):
    """Print a node's body, without its metadata block."""

    async def do_read():
        storage = await _open(ctx.obj)
        return await storage.read_content(path)

    typer.echo(_run(do_read()))


@app.command("summarize")
def summarize(
    ctx: typer.Context,
    path: str = typer.Argument("/", help="Folder (or file whose folder) to summarize"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Refresh every subfolder first"),
    rename: bool = typer.Option(
        False, "--rename", help="Rename children to match their 'title' metadata"
    ),
):
    """Regenerate a folder's index document."""

    async def do_summarize():
        storage = await _open(ctx.obj)
        await update_folder_summary(storage, path, recursive=recursive, rename=rename)

    _run(do_summarize())
    print(f"[green]Summary updated for {escape(path)}[/green]")


if __name__ == "__main__":
    app()
