"""
Main CLI application using Typer.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from ..adapters.google_authenticator import GoogleAuthenticator
from ..adapters.google_calendar_client import GoogleCalendarClient
from ..adapters.mock_calendar_client import MockCalendarClient
from ..config import AppConfig, load_config
from ..domain.exceptions import CalendarSlotsError
from ..domain.models import CalendarEvent
from ..domain.slot_finder import SlotFinder
from ..services.calendar_service import CalendarService, SlotSearchRequest

app = typer.Typer(
    name="gcalslots",
    help="Read your Google Calendar and find free meeting slots",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    """Options shared by all commands."""
    config_file: Optional[Path] = None
    mock: bool = False

    def load_config(self) -> AppConfig:
        return load_config(self.config_file)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build_authenticator(config: AppConfig) -> GoogleAuthenticator:
    return GoogleAuthenticator(
        client_secrets_file=config.client_secrets_file,
        credentials_dir=config.credentials_dir,
        token_file=config.token_file,
    )


def _build_service(state: CliState) -> CalendarService:
    """Wire the gateway (real or mock) and the slot finder into a service."""
    config = state.load_config()

    if state.mock:
        err_console.print("[yellow]⚠  MOCK MODE: using test data[/yellow]")
        client = MockCalendarClient(timezone=config.timezone)
    else:
        session = _build_authenticator(config).authorized_session()
        client = GoogleCalendarClient(
            session=session,
            calendar_id=config.calendar_id,
            timezone=config.timezone,
        )

    return CalendarService(
        calendar_client=client,
        slot_finder=SlotFinder(exclude_weekdays=config.exclude_days),
        pending_invite_days=config.pending_invite_days,
    )


def _fail(error: Exception) -> NoReturn:
    logger.debug("Command failed", exc_info=error)
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def format_week(events: List[CalendarEvent]) -> str:
    """Group events by day, keeping the chronological order of days."""
    by_day: "OrderedDict[str, List[CalendarEvent]]" = OrderedDict()
    for event in events:
        by_day.setdefault(event.start.format("dddd, MMM D"), []).append(event)

    lines = ["This Week's Events:"]
    for day, day_events in by_day.items():
        lines.append(f"\n{day}:")
        for event in day_events:
            location = f" ({event.location})" if event.location else ""
            start = "All day" if event.all_day else event.start.format("hh:mm A")
            lines.append(f"  • {start}: {event.summary}{location}")
    return "\n".join(lines)


def format_invite(event: CalendarEvent) -> str:
    return (
        f"• {event.summary}\n"
        f"  Date: {event.start.format('ddd, MMM D')} at {event.start.format('hh:mm A')}\n"
        f"  Organizer: {event.organizer or 'Unknown'}"
    )


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Use mock data and skip authentication.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Read-only Google Calendar views and free slot search.
    """
    _configure_logging(verbose)
    ctx.obj = CliState(config_file=config_file, mock=mock)


@app.command()
def today(ctx: typer.Context):
    """
    Show all calendar events for today.
    """
    try:
        service = _build_service(ctx.obj)
        now = service.now()
        events = service.events_today(now)
    except (CalendarSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not events:
        console.print("No events scheduled for today.")
        return

    day = now.format("DD.MM.YYYY")
    console.print(f"[bold]Today's Events ({day}):[/bold]\n")
    for event in events:
        console.print(event.format_display(), markup=False)


@app.command()
def week(ctx: typer.Context):
    """
    Show all calendar events for the current week (Monday to Sunday).
    """
    try:
        service = _build_service(ctx.obj)
        events = service.events_this_week()
    except (CalendarSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not events:
        console.print("No events scheduled for this week.")
        return

    console.print(format_week(events), markup=False)


@app.command()
def invites(ctx: typer.Context):
    """
    Show calendar invitations that still require a response.
    """
    try:
        service = _build_service(ctx.obj)
        pending = service.pending_invites()
    except (CalendarSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not pending:
        console.print("No pending invitations requiring a response.")
        return

    console.print(f"[bold]Pending Invitations ({len(pending)}):[/bold]\n")
    console.print("\n\n".join(format_invite(event) for event in pending), markup=False)


@app.command()
def find(
    ctx: typer.Context,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Meeting duration in minutes (15-480)")] = None,
    days: Annotated[Optional[int], typer.Option("--days", help="Number of days to search ahead (1-14)")] = None,
    start_hour: Annotated[Optional[int], typer.Option("--start-hour", help="Start of working hours (0-23)")] = None,
    end_hour: Annotated[Optional[int], typer.Option("--end-hour", help="End of working hours (1-24)")] = None,
):
    """
    Find free slots for a meeting of the given duration.

    Examples:

        gcalslots find --duration 30

        gcalslots find -d 60 --days 14 --start-hour 8 --end-hour 18

        # Use mock data (for testing without Google)
        gcalslots --mock find -d 45
    """
    try:
        config = ctx.obj.load_config()
        request = SlotSearchRequest.create(
            duration_minutes=duration if duration is not None else config.defaults.duration_minutes,
            search_days=days if days is not None else config.defaults.search_days,
            working_hours_start=start_hour if start_hour is not None else config.defaults.start_hour,
            working_hours_end=end_hour if end_hour is not None else config.defaults.end_hour,
        )
        service = _build_service(ctx.obj)
        slots = service.find_available_slots(request)
    except (CalendarSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not slots:
        console.print(
            f"[yellow]No available {request.duration_minutes}-minute slots found "
            f"in the next {request.search_days} days.[/yellow]"
        )
        return

    console.print(f"[bold green]Available {request.duration_minutes}-minute slots:[/bold green]\n")
    for index, slot in enumerate(slots, 1):
        console.print(f"{index}. {slot.format_display()}", markup=False)


@app.command()
def test_auth(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        help="Force re-authentication"
    )
):
    """
    Test Google Calendar authentication.
    """
    try:
        config = ctx.obj.load_config()

        console.print("\n[bold]Testing Google Calendar authentication...[/bold]\n")

        session = _build_authenticator(config).authorized_session(force_refresh=force)
        client = GoogleCalendarClient(
            session=session,
            calendar_id=config.calendar_id,
            timezone=config.timezone,
        )
        calendar_info = client.test_connection()
    except (CalendarSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(Panel.fit(
        f"[bold green]✓ Authentication successful![/bold green]\n\n"
        f"[bold]Calendar:[/bold] {calendar_info.get('summary', 'N/A')}\n"
        f"[bold]Time zone:[/bold] {calendar_info.get('timeZone', 'N/A')}",
        title="✓ Connection test"
    ))
    console.print()


@app.command()
def clear_cache(ctx: typer.Context):
    """
    Clear the authentication token cache.
    """
    try:
        config = ctx.obj.load_config()
        _build_authenticator(config).clear_cache()
    except (CalendarSlotsError, FileNotFoundError, ValueError, OSError) as e:
        _fail(e)

    console.print("\n[green]✓ Token cache cleared.[/green]")
    console.print("You will need to re-authenticate on the next call.\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]gcalslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
