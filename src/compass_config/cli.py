"""Typer-based CLI for Compass project settings."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import (
    CompassConfig,
    ConfigError,
    detect_format,
    dumps_config,
    load_config,
    read_document,
    save_config,
)
from .models import ValidationResult
from .validators import check_config

app = typer.Typer(help="Read, check and convert Compass config.rb project settings.")
console = Console()

SHOW_FORMATS = ("table", "rb", "yaml", "json")


def _configure_logging(level: str, log_file: Path | None) -> None:
    logger.remove()
    logger.add(lambda message: console.print(message, end="", markup=False, highlight=False), level=level)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level)


def _settings_table(config: CompassConfig) -> Table:
    table = Table(title="Compass settings")
    table.add_column("Option")
    table.add_column("Value")
    for name, value in config.options().items():
        if isinstance(value, bool):
            rendered = "true" if value else "false"
        elif name == "output_style":
            rendered = value.value
        else:
            rendered = value
        table.add_row(name, rendered)
    for item in config.requires:
        table.add_row("require", item)
    return table


def _print_messages(result: ValidationResult) -> None:
    for message in result.errors:
        console.print(f"[red]ERROR:[/red] {escape(message.text)}")
    for message in result.warnings:
        console.print(f"[yellow]WARNING:[/yellow] {escape(message.text)}")


@app.command()
def show(
    path: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True),
    fmt: str = typer.Option("table", "--format", help="Output format (table, rb, yaml, json)"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """Print the settings held in PATH."""

    _configure_logging(log_level.upper(), None)
    if fmt not in SHOW_FORMATS:
        console.print(f"[red]Unknown format '{fmt}'; choose from {', '.join(SHOW_FORMATS)}[/red]")
        raise typer.Exit(code=1)
    try:
        config = load_config(path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=4)

    if fmt == "table":
        console.print(_settings_table(config))
    else:
        typer.echo(dumps_config(config, fmt), nl=False)


@app.command()
def check(
    path: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True),
    strict: bool = typer.Option(False, "--strict/--no-strict", help="Treat warnings as errors"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write log output to this file"),
) -> None:
    """Validate the settings held in PATH."""

    _configure_logging(log_level.upper(), log_file)
    try:
        config = load_config(path)
        document = read_document(path) if detect_format(path) == "rb" else None
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=4)

    result = check_config(config, document)
    _print_messages(result)
    if result.has_errors or (strict and result.has_warnings):
        raise typer.Exit(code=3)
    if result.has_warnings:
        raise typer.Exit(code=2)
    console.print("[green]Configuration is valid.[/green]")


@app.command()
def convert(
    source: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True),
    dest: Path = typer.Argument(..., resolve_path=True),
    force: bool = typer.Option(False, "--force", help="Overwrite DEST if it exists"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Convert SOURCE into the format implied by DEST's suffix."""

    _configure_logging(log_level.upper(), None)
    if dest.exists() and not force:
        console.print(f"[red]{dest} already exists; pass --force to overwrite[/red]")
        raise typer.Exit(code=1)
    try:
        detect_format(dest)
        config = load_config(source)
        save_config(config, dest)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=4)

    console.print(f"[green]Wrote {dest}[/green]")


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path("config.rb"), writable=True, resolve_path=True),
    force: bool = typer.Option(False, "--force", help="Overwrite PATH if it exists"),
) -> None:
    """Write the default configuration file to PATH."""

    _configure_logging("INFO", None)
    if path.exists() and not force:
        console.print(f"[red]{path} already exists; pass --force to overwrite[/red]")
        raise typer.Exit(code=1)
    try:
        save_config(CompassConfig(), path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=4)
    console.print(f"[green]Wrote configuration to {path}[/green]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
