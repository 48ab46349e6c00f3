#!/usr/bin/env python3
"""
Notorica CLI.

Command-line client for the note store. Every command opens the configured
storage, applies its intents, waits for pending writes and exits.

Usage:
    notorica --help
    notorica list
    notorica add "Groceries" --content "eggs, milk"
    notorica add "Trip plan" --doc
    notorica edit 1760870000000 --title "Groceries (week 42)"
    notorica label-color 1760870000000 "#FF5252"
    notorica theme dark
    notorica calendar
    notorica clear --yes
    notorica --system-theme dark --debug list
"""

import asyncio
import sys
from collections.abc import Callable
from typing import Any, TypeVar

import click
import structlog
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from notorica.core.config import get_app_config, get_settings, validate_project_root
from notorica.core.database import dispose_engine
from notorica.core.exceptions import ApplicationError
from notorica.core.logging import get_logger, setup_logging
from notorica.schemas.dashboard import DashboardEntry, DashboardLayout
from notorica.services.documents import parse_document
from notorica.services.notebook import NotebookService, open_notebook

T = TypeVar("T")

console = Console()

CONFIG_SECTIONS = ("application", "storage", "logging", "palettes", "dashboard")


def _run(ctx: click.Context, operation: Callable[[NotebookService], T]) -> T:
    """Open the notebook, run operation, flush writes. Exits 1 on app errors."""
    logger = ctx.obj["logger"]

    async def session() -> T:
        service = await open_notebook(system_is_dark=ctx.obj["system_is_dark"])
        try:
            return operation(service)
        finally:
            await service.close()
            await dispose_engine()

    try:
        return asyncio.run(session())
    except ApplicationError as e:
        logger.debug("Command failed", extra={"code": e.code, "error": e.message})
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)


def _rich_color(color: str) -> str:
    """Rich wants #RRGGBB; expand #RGB."""
    if len(color) == 4:
        return "#" + "".join(ch * 2 for ch in color[1:])
    return color


def _entry_panel(entry: DashboardEntry) -> Panel:
    body = Text(entry.preview or " ")
    if entry.relative_time is not None:
        body.append(f"\n{entry.relative_time.label}", style="dim")
    subtitle = None if entry.is_pseudo else entry.note.id
    return Panel(
        body,
        title=Text(entry.note.title, style="bold"),
        subtitle=subtitle,
        border_style=_rich_color(entry.label_color),
    )


def _render_layout(layout: DashboardLayout) -> None:
    if layout.mode == "loading":
        console.print("Loading your notes...")
        return

    if layout.mode == "empty":
        for entry in layout.entries:
            console.print(_entry_panel(entry))
        console.print(layout.empty_message)
        console.print(layout.empty_hint, style="dim")
        return

    grid = Table.grid(expand=True, padding=(0, 1))
    grid.add_column(ratio=1)
    grid.add_column(ratio=1)
    grid.add_row(
        Group(*(_entry_panel(entry) for entry in layout.left)),
        Group(*(_entry_panel(entry) for entry in layout.right)),
    )
    console.print(grid)


@click.group()
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--system-theme",
    type=click.Choice(["light", "dark"]),
    default=None,
    help="Theme reported by the system. Defaults to NOTORICA_SYSTEM_THEME.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool, system_theme: str | None) -> None:
    """
    Notorica notes.

    \b
    Examples:
        notorica list
        notorica add "Groceries" --content "eggs, milk"
        notorica theme toggle
        notorica config palettes
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)

    theme = system_theme if system_theme is not None else get_settings().system_theme
    ctx.obj = {"logger": logger, "system_is_dark": theme == "dark"}

    logger.debug("CLI invoked", extra={"command": ctx.invoked_subcommand, "log_level": log_level})


@main.command("list")
@click.pass_context
def list_notes(ctx: click.Context) -> None:
    """Show the dashboard."""
    def operation(service: NotebookService) -> None:
        header = service.header()
        console.print(Text(header.title, style="bold"))
        console.print(f"Day progress {header.day_progress:.0f}%", style="dim")
        _render_layout(service.dashboard())

    _run(ctx, operation)


@main.command()
@click.argument("note_id")
@click.pass_context
def show(ctx: click.Context, note_id: str) -> None:
    """Show one note in full."""
    def operation(service: NotebookService) -> None:
        note = service.get_note(note_id)
        console.print(Text(note.title, style="bold"))
        console.print(f"{note.date} {note.time or ''}".rstrip(), style="dim")
        if note.type != "doc":
            console.print(Text(note.content))
            return
        for number, sheet in enumerate(parse_document(note.content), start=1):
            console.print(f"Sheet {number}", style="bold")
            for index, quadrant in enumerate(sheet.quadrants, start=1):
                console.print(Text(f"  [{index}] {quadrant.type}: {quadrant.content}"))

    _run(ctx, operation)


@main.command()
@click.argument("title")
@click.option("--content", "-c", default="", help="Note text.")
@click.option("--doc", is_flag=True, help="Create a multi-sheet document.")
@click.pass_context
def add(ctx: click.Context, title: str, content: str, doc: bool) -> None:
    """Create a note."""
    note = _run(ctx, lambda service: service.create_note(title, content, "doc" if doc else "note"))
    click.echo(f"Created {note.id}")


@main.command()
@click.argument("note_id")
@click.option("--title", "-t", default=None, help="New title.")
@click.option("--content", "-c", default=None, help="New text.")
@click.pass_context
def edit(ctx: click.Context, note_id: str, title: str | None, content: str | None) -> None:
    """Edit a note's title or content."""
    _run(ctx, lambda service: service.edit_note(note_id, title, content))
    click.echo(f"Updated {note_id}")


@main.command()
@click.argument("note_id")
@click.pass_context
def delete(ctx: click.Context, note_id: str) -> None:
    """Delete a note."""
    _run(ctx, lambda service: service.delete_note(note_id))
    click.echo(f"Deleted {note_id}")


@main.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Delete every note."""
    if not yes and not click.confirm(
        "Are you sure you want to delete all your notes? This cannot be undone."
    ):
        click.echo("Cancelled.")
        return
    _run(ctx, lambda service: service.clear_all())
    click.echo("All notes cleared.")


@main.command("label-color")
@click.argument("note_id")
@click.argument("color")
@click.pass_context
def label_color(ctx: click.Context, note_id: str, color: str) -> None:
    """Set a note's label color for the current theme."""
    _run(ctx, lambda service: service.set_label_color(note_id, color))
    click.echo(f"Label color of {note_id} set to {color}")


@main.command("box-color")
@click.argument("note_id")
@click.argument("color")
@click.pass_context
def box_color(ctx: click.Context, note_id: str, color: str) -> None:
    """Set a note's box color for the current theme."""
    _run(ctx, lambda service: service.set_box_color(note_id, color))
    click.echo(f"Box color of {note_id} set to {color}")


@main.command()
@click.argument("mode", type=click.Choice(["dark", "light", "toggle"]), default="toggle")
@click.pass_context
def theme(ctx: click.Context, mode: str) -> None:
    """Choose the theme. A manual choice stops following the system theme."""
    def operation(service: NotebookService) -> bool:
        if mode == "toggle":
            return service.toggle_dark_mode().is_dark
        return service.set_dark_mode(mode == "dark").is_dark

    is_dark = _run(ctx, operation)
    click.echo(f"Theme: {'dark' if is_dark else 'light'}")


@main.command()
@click.pass_context
def calendar(ctx: click.Context) -> None:
    """Toggle the Nepali date in the dashboard header."""
    enabled = _run(ctx, lambda service: service.toggle_nepali_date().is_nepali_date)
    click.echo(f"Nepali date {'enabled' if enabled else 'disabled'}")


@main.command()
@click.argument("section", required=False, type=click.Choice(CONFIG_SECTIONS))
@click.pass_context
def config(ctx: click.Context, section: str | None) -> None:
    """Display configuration settings."""
    logger = ctx.obj["logger"]
    app_config = get_app_config()

    for name in (section,) if section else CONFIG_SECTIONS:
        data: dict[str, Any] = getattr(app_config, name).model_dump()
        click.echo(f"{name.title()} Settings (from YAML):")
        click.echo("-" * 40)
        _echo_mapping(data, indent=2)
        click.echo()

    logger.info("Configuration displayed successfully")


def _echo_mapping(data: dict[str, Any], indent: int) -> None:
    pad = " " * indent
    for key, value in data.items():
        if isinstance(value, dict):
            click.echo(f"{pad}{key}:")
            _echo_mapping(value, indent + 2)
        elif isinstance(value, list):
            click.echo(f"{pad}{key}: {', '.join(str(item) for item in value)}")
        else:
            click.echo(f"{pad}{key}: {value}")


if __name__ == "__main__":
    main()
