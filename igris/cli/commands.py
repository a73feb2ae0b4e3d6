"""IGRIS CLI commands for Google Calendar."""

from __future__ import annotations

import asyncio
import datetime as dt
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from igris.logging_config import setup_logging
from igris.modules.calendar import CalendarEvent, GoogleCalendarManager

app = typer.Typer(help="IGRIS Google Calendar CLI", no_args_is_help=True)
console = Console()


def _async_run(coro):
    """Run an async coroutine."""
    return asyncio.run(coro)


def _parse_datetime(value: str, option: str) -> dt.datetime:
    try:
        return dt.datetime.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Invalid {option}: {value!r} (expected ISO 8601, e.g. 2026-02-12T10:00)[/red]")
        raise typer.Exit(2)


def _fail(action: str, error: Optional[Exception]) -> None:
    console.print(f"[red]✗ {action} failed: {error}[/red]")
    raise typer.Exit(1)


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    setup_logging()


@app.command()
def signin() -> None:
    """Sign in to Google Calendar (opens a browser when no token is stored)."""
    manager = GoogleCalendarManager.shared_manager()
    errors: list[Optional[Exception]] = []

    if not _async_run(manager.sign_in(completion=lambda ok, err: errors.append(err))):
        _fail("Sign-in", errors[0] if errors else None)
    console.print("[green]✓[/green] Signed in to Google Calendar")


@app.command()
def signout() -> None:
    """Sign out and forget the stored token."""
    GoogleCalendarManager.shared_manager().sign_out()
    console.print("[green]✓[/green] Signed out")


@app.command()
def events(
    max_results: Optional[int] = typer.Option(None, "--max", "-n", help="Maximum number of events"),
) -> None:
    """List upcoming events."""
    manager = GoogleCalendarManager.shared_manager()
    errors: list[Optional[Exception]] = []

    async def _list() -> Optional[list[CalendarEvent]]:
        if not await manager.sign_in(completion=lambda ok, err: errors.append(err)):
            return None
        result: list[Optional[list[CalendarEvent]]] = []

        def _done(items, err) -> None:
            result.append(items)
            errors.append(err)

        await manager.fetch_events(completion=_done, max_results=max_results)
        return result[0] if result else None

    items = _async_run(_list())
    if items is None:
        _fail("Fetching events", next((e for e in errors if e), None))

    if not items:
        console.print("[yellow]No upcoming events.[/yellow]")
        return

    table = Table(title="Upcoming events")
    table.add_column("Start", style="cyan", no_wrap=True)
    table.add_column("End", style="cyan", no_wrap=True)
    table.add_column("Summary", style="green")
    table.add_column("Description", style="white")

    for event in items:
        fmt = "%Y-%m-%d" if event.all_day else "%Y-%m-%d %H:%M"
        table.add_row(
            event.start.strftime(fmt),
            event.end.strftime(fmt),
            event.summary or "(no title)",
            event.description or "",
        )

    console.print(table)
    console.print(f"\nTotal: {len(items)} events")


@app.command()
def add(
    summary: str = typer.Argument(..., help="Event title"),
    start: str = typer.Option(..., "--start", "-s", help="Start time (ISO 8601)"),
    end: str = typer.Option(..., "--end", "-e", help="End time (ISO 8601)"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Event description"),
) -> None:
    """Add an event to the calendar."""
    start_date = _parse_datetime(start, "--start")
    end_date = _parse_datetime(end, "--end")
    manager = GoogleCalendarManager.shared_manager()
    errors: list[Optional[Exception]] = []

    async def _add() -> bool:
        if not await manager.sign_in(completion=lambda ok, err: errors.append(err)):
            return False
        return await manager.add_event(
            summary, description, start_date, end_date,
            completion=lambda ok, err: errors.append(err),
        )

    if not _async_run(_add()):
        _fail("Adding event", next((e for e in errors if e), None))
    console.print(f"[green]✓[/green] Added [bold]{summary}[/bold]")


@app.command()
def version() -> None:
    """Show IGRIS version."""
    try:
        import importlib.metadata
        ver = importlib.metadata.version("igris")
    except Exception:
        ver = "unknown"

    console.print(f"[bold cyan]IGRIS[/bold cyan] version [green]{ver}[/green]")
