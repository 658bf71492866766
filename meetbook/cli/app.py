"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..adapters import GoogleCalendarClient, InMemoryCalendarClient
from ..config import (
    MAX_DAY_SLOTS,
    MAX_LOOKAHEAD_DAYS,
    MAX_UPCOMING_SLOTS,
    MEETING_DURATION_MINUTES,
    WEEKLY_SCHEDULE,
    Settings,
)
from ..domain.exceptions import MeetbookError, NotAWorkingDay
from ..domain.slot_calculator import SlotCalculator
from ..domain.timepoints import format_slot_start, from_civil, from_civil_date
from ..services import AvailabilityService

app = typer.Typer(
    name="meetbook",
    help="Discover and book meeting slots on a Google Calendar",
    add_completion=False
)

console = Console()

MockOption = Annotated[bool, typer.Option("--mock", help="Use an in-memory calendar instead of Google.")]
BusyFileOption = Annotated[
    Optional[Path],
    typer.Option("--busy-file", help="JSON list of {start, end} busy periods for --mock."),
]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _build_client(mock: bool, busy_file: Optional[Path]):
    if mock:
        if busy_file:
            return InMemoryCalendarClient.from_json(busy_file, timezone=WEEKLY_SCHEDULE.timezone)
        return InMemoryCalendarClient(timezone=WEEKLY_SCHEDULE.timezone)

    settings = Settings()
    return GoogleCalendarClient.from_service_account(
        client_email=settings.google_client_email,
        private_key=settings.google_private_key,
        calendar_id=settings.calendar_id,
        timezone=WEEKLY_SCHEDULE.timezone,
        timeout=settings.request_timeout_seconds,
    )


def _build_availability(mock: bool, busy_file: Optional[Path]) -> AvailabilityService:
    if mock:
        console.print("[yellow]⚠  MOCK MODE: using in-memory calendar data[/yellow]\n")

    return AvailabilityService(
        calendar_client=_build_client(mock, busy_file),
        schedule=WEEKLY_SCHEDULE,
        slot_calculator=SlotCalculator(slot_minutes=MEETING_DURATION_MINUTES),
    )


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "0.0.0.0",
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Port; defaults to PORT from the environment")] = None,
):
    """
    Run the HTTP API.
    """
    try:
        settings = Settings()
    except ValidationError as e:
        _fail(f"Invalid configuration:\n{e}")

    _configure_logging(settings.log_level)

    uvicorn.run(
        "meetbook.api.app:create_app",
        factory=True,
        host=host,
        port=port or settings.port,
        log_config=None,
    )


@app.command()
def upcoming(mock: MockOption = False, busy_file: BusyFileOption = None):
    """
    Show the next free slots, starting from now.
    """
    _configure_logging("WARNING")

    try:
        availability = _build_availability(mock, busy_file)
        slots = availability.upcoming_free_slots(
            cap=MAX_UPCOMING_SLOTS,
            max_days_lookahead=MAX_LOOKAHEAD_DAYS,
        )
    except (MeetbookError, ValidationError) as e:
        _fail(str(e))

    if not slots:
        console.print("[yellow]⚠ No free slots found in the coming week.[/yellow]")
        return

    table = Table(
        title=f"Upcoming free slots ({WEEKLY_SCHEDULE.timezone})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Start", style="bold yellow")
    table.add_column("End", style="dim")

    for slot in slots:
        table.add_row(format_slot_start(slot.start), slot.end.format("HH:mm"))

    console.print()
    console.print(table)
    console.print()


@app.command()
def day(
    date: Annotated[str, typer.Argument(help="Day to search (DD/MM/YYYY)")],
    mock: MockOption = False,
    busy_file: BusyFileOption = None,
):
    """
    Show a sample of free slots on one day.
    """
    _configure_logging("WARNING")

    try:
        availability = _build_availability(mock, busy_file)
        result = availability.slots_for_day(from_civil_date(date), cap=MAX_DAY_SLOTS)
    except NotAWorkingDay as e:
        _fail(f"{date} is a {e.day_of_week}, which is not a working day.")
    except (MeetbookError, ValidationError) as e:
        _fail(str(e))

    hours = result.working_hours.as_dict()
    console.print(f"\n[bold cyan]{result.day_of_week} {date}[/bold cyan] ({hours['start']} - {hours['end']})")

    if not result.slots:
        console.print("[yellow]⚠ No free slots on this day.[/yellow]\n")
        return

    for slot in result.slots:
        console.print(f"  {format_slot_start(slot.start)}")
    console.print()


@app.command()
def check(
    date: Annotated[str, typer.Argument(help="Date (DD/MM/YYYY)")],
    time: Annotated[str, typer.Argument(help="Start time (HH:mm)")],
    mock: MockOption = False,
    busy_file: BusyFileOption = None,
):
    """
    Check whether one slot is free.
    """
    _configure_logging("WARNING")

    try:
        availability = _build_availability(mock, busy_file)
        start = from_civil(date, time, WEEKLY_SCHEDULE.timezone)
        available = availability.is_available(start)
    except (MeetbookError, ValidationError) as e:
        _fail(str(e))

    if available:
        console.print(f"[bold green]✓ {date} {time} is free[/bold green]")
    else:
        console.print(f"[bold red]✗ {date} {time} is busy[/bold red]")


@app.command()
def test_connection():
    """
    Test Google Calendar authentication and access.
    """
    _configure_logging("WARNING")

    try:
        client = _build_client(mock=False, busy_file=None)
        calendar = client.test_connection()
    except (MeetbookError, ValidationError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}\n")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]✓ Connection successful![/bold green]\n\n"
        f"[bold]Calendar:[/bold] {calendar.get('summary', 'N/A')}\n"
        f"[bold]Timezone:[/bold] {calendar.get('timeZone', 'N/A')}",
        title="✓ Connection test"
    ))


@app.command()
def version():
    """
    Show version information.
    """
    console.print(f"\n[bold cyan]meetbook[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
