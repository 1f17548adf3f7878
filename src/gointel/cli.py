# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line front-end exercising the integration services."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .completion import CompletionRequest
from .config import IntegrationConfig, load_config
from .errors import GointelError
from .logging import fail, info, ok, warn
from .session import GoToolSession

app = typer.Typer(name="gointel", help="Go code intelligence through external tools.", no_args_is_help=True)
console = Console(highlight=False)


def build_session(config: IntegrationConfig) -> GoToolSession:
    """Return the session used by CLI commands."""

    return GoToolSession.from_config(config)


def _session(ctx: typer.Context) -> GoToolSession:
    session = ctx.obj
    if not isinstance(session, GoToolSession):
        raise typer.Exit(code=1)
    return session


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        fail(f"Cannot read {path}: {exc}")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[Path | None, typer.Option("--config", help="TOML configuration file.")] = None,
) -> None:
    """Load configuration and open a tool session."""

    try:
        session = build_session(load_config(config))
    except GointelError as exc:
        fail(str(exc))
        raise typer.Exit(code=1) from exc
    ctx.obj = session
    ctx.call_on_close(session.close)


@app.command("outline")
def outline_command(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Go source file.")],
) -> None:
    """Print the declarations of FILE."""

    try:
        symbols = _session(ctx).outline.symbol_information(file)
    except GointelError as exc:
        fail(str(exc))
        raise typer.Exit(code=1) from exc
    if not symbols:
        warn(f"No symbols found in {file}")
        return
    table = Table(box=box.SIMPLE)
    table.add_column("Symbol", style="bold")
    table.add_column("Kind")
    table.add_column("Container")
    table.add_column("Range")
    for symbol in symbols:
        table.add_row(symbol.name, symbol.kind.value, symbol.container_name or "-", f"{symbol.start}-{symbol.end}")
    console.print(table)


@app.command("packages")
def packages_command(
    ctx: typer.Context,
    file: Annotated[Path | None, typer.Option("--file", help="File whose imports are excluded.")] = None,
    exclude_imported: Annotated[bool, typer.Option("--exclude-imported", help="Skip packages FILE imports.")] = False,
) -> None:
    """List importable packages."""

    try:
        packages = _session(ctx).catalog.list_packages(exclude_imported=exclude_imported, current_file=file)
    except GointelError as exc:
        fail(str(exc))
        raise typer.Exit(code=1) from exc
    for package in packages:
        typer.echo(package.path)


@app.command("complete")
def complete_command(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Go source file.")],
    line: Annotated[int, typer.Argument(help="Zero-based line.")],
    character: Annotated[int, typer.Argument(help="Zero-based column.")],
) -> None:
    """Print completion suggestions at LINE:CHARACTER of FILE."""

    request = CompletionRequest(filename=str(file), text=_read(file), line=line, character=character)
    try:
        suggestions = _session(ctx).completion.complete(request)
    except GointelError as exc:
        fail(str(exc))
        raise typer.Exit(code=1) from exc
    table = Table(box=box.SIMPLE)
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("Detail", overflow="fold")
    for item in suggestions:
        table.add_row(item.display_name, item.kind.value, item.detail)
    console.print(table)


@app.command("rename")
def rename_command(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Go source file.")],
    line: Annotated[int, typer.Argument(help="Zero-based line.")],
    character: Annotated[int, typer.Argument(help="Zero-based column.")],
    new_name: Annotated[str, typer.Argument(help="Replacement identifier.")],
) -> None:
    """Rename the identifier at LINE:CHARACTER of FILE."""

    try:
        applied = _session(ctx).rename.rename(str(file), _read(file), line, character, new_name)
    except GointelError as exc:
        fail(str(exc))
        raise typer.Exit(code=1) from exc
    if applied:
        ok(f"Renamed to {new_name}")
    else:
        raise typer.Exit(code=1)


@app.command("add-import")
def add_import_command(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Go source file.")],
    import_path: Annotated[str, typer.Argument(help="Package path to import.")],
    write: Annotated[bool, typer.Option("--write", help="Rewrite FILE instead of printing.")] = False,
) -> None:
    """Add an import of IMPORT_PATH to FILE."""

    updated = _session(ctx).imports.add_import(_read(file), import_path)
    if updated is None:
        fail(f"{file} has no package clause; cannot place the import")
        raise typer.Exit(code=1)
    if write:
        file.write_text(updated, encoding="utf-8")
        info(f"Imported {import_path} in {file}")
    else:
        typer.echo(updated, nl=False)


__all__ = ["app", "build_session"]
