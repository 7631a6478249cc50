"""header-translator CLI: turn AST dumps into binding declarations."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import Settings, load_settings
from ..models.statements import (
    AliasDecl,
    ClassDecl,
    EnumDecl,
    FnDecl,
    Methods,
    ProtocolDecl,
    ProtocolImpl,
    Stmt,
    StructDecl,
    VarDecl,
    statement_name,
)
from ..translator.errors import TranslationError
from ..translator.service import TranslationService

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(add_completion=False, no_args_is_help=True)


def _configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        console.print(f"[red]Invalid log level:[/red] {escape(level)}")
        raise typer.Exit(1)
    logging.basicConfig(
        level=numeric,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=False)],
        force=True,
    )


def _resolve_settings(
    config_path: Optional[Path],
    overrides: Optional[Path],
    output: Optional[Path],
    log_level: Optional[str],
) -> Settings:
    settings = load_settings(config_path)
    if overrides:
        settings.overrides_path = Path(overrides).expanduser().resolve()
    if output:
        settings.output_dir = Path(output).expanduser().resolve()
    if log_level:
        settings.log_level = log_level
    _configure_logging(settings.log_level)
    return settings


def _detail(stmt: Stmt) -> str:
    if isinstance(stmt, ClassDecl):
        return "super: " + ", ".join(superclass.name for superclass in stmt.superclasses)
    if isinstance(stmt, Methods):
        detail = f"{len(stmt.methods)} methods"
        if stmt.category_name:
            detail += f" ({stmt.category_name})"
        return detail
    if isinstance(stmt, ProtocolDecl):
        return f"{len(stmt.methods)} methods"
    if isinstance(stmt, ProtocolImpl):
        return stmt.protocol
    if isinstance(stmt, StructDecl):
        return f"{len(stmt.fields)} fields"
    if isinstance(stmt, EnumDecl):
        kind = stmt.kind.value if stmt.kind else "plain"
        return f"{kind}, {len(stmt.variants)} variants"
    if isinstance(stmt, VarDecl):
        return str(stmt.ty)
    if isinstance(stmt, FnDecl):
        return "inline" if stmt.has_body else "extern"
    if isinstance(stmt, AliasDecl):
        return str(stmt.ty)
    return ""


@app.command()
def translate(
    dump: Path = typer.Argument(..., help="AST dump (.json, .yaml) of one header"),
    overrides: Optional[Path] = typer.Option(None, "--overrides", "-o", help="Per-declaration override YAML"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    output: Optional[Path] = typer.Option(None, "--output", help="Write <name>.rs into this directory"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """Translate one header dump and print or write the bindings."""
    settings = _resolve_settings(config, overrides, output, log_level)

    if not dump.exists():
        console.print(f"[red]Dump not found:[/red] {dump}")
        raise typer.Exit(1)

    service = TranslationService(settings)
    try:
        result = service.translate_file(dump)
    except (TranslationError, ValueError) as exc:
        console.print(f"[red]Translation failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if output:
        target = service.write(result)
        console.print(f"[green]Wrote[/green] {target}")
    else:
        typer.echo(result.text, nl=False)


@app.command()
def statements(
    dump: Path = typer.Argument(..., help="AST dump (.json, .yaml) of one header"),
    overrides: Optional[Path] = typer.Option(None, "--overrides", "-o", help="Per-declaration override YAML"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """List the statements a header dump produces."""
    settings = _resolve_settings(config, overrides, None, log_level)

    if not dump.exists():
        console.print(f"[red]Dump not found:[/red] {dump}")
        raise typer.Exit(1)

    service = TranslationService(settings)
    try:
        result = service.translate_file(dump)
    except (TranslationError, ValueError) as exc:
        console.print(f"[red]Translation failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if not result.statements:
        console.print(f"[yellow]No statements produced for '{dump}'[/yellow]")
        return

    table = Table(title=f"Statements in {result.unit.name}")
    table.add_column("Statement", style="cyan")
    table.add_column("Name")
    table.add_column("Detail")

    for stmt in result.statements:
        table.add_row(type(stmt).__name__, statement_name(stmt), _detail(stmt))

    console.print(table)


@app.command()
def check(
    dump: Path = typer.Argument(..., help="AST dump (.json, .yaml) of one header"),
    overrides: Optional[Path] = typer.Option(None, "--overrides", "-o", help="Per-declaration override YAML"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
):
    """Translate a dump twice and verify both runs agree."""
    settings = _resolve_settings(config, overrides, None, log_level)

    if not dump.exists():
        console.print(f"[red]Dump not found:[/red] {dump}")
        raise typer.Exit(1)

    service = TranslationService(settings)
    try:
        produced = service.verify(service.load(dump))
    except (TranslationError, ValueError) as exc:
        console.print(f"[red]Check failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    console.print(f"[green]OK[/green] {len(produced)} statements")
