"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Annotated, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..adapters.roster_store import YamlRosterStore
from ..config import AppConfig
from ..domain.exceptions import OverlappingSessions, SchedulingError
from ..domain.models import SESSION_CONSTRAINTS, Session, Weekday, parse_clock_time
from ..logging_config import configure_logging
from ..services.schedule_service import ScheduleService

app = typer.Typer(
    name="tutorslots",
    help="Keep track of students' weekly lesson slots and find free time",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
SessionOption = Annotated[
    Optional[List[str]],
    typer.Option("--session", "-s", help="Session such as 'MON 0900 - 1000'. Repeatable."),
]


def _open_service(config_file: Optional[Path]) -> tuple[AppConfig, ScheduleService]:
    """Load configuration and the stored roster."""
    config = AppConfig.load_or_default(config_file)
    configure_logging(config.log_level)
    service = ScheduleService(store=YamlRosterStore(config.data_file))
    service.load()
    return config, service


def _parse_sessions(texts: Optional[List[str]]) -> List[Session]:
    return [Session.parse(text.upper()) for text in texts or []]


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    if isinstance(exc, OverlappingSessions):
        console.print("[yellow]Pick a different time for the session.[/yellow]")
    raise typer.Exit(1)


def _print_sessions(owner: str, sessions: List[Session]) -> None:
    listing = ", ".join(str(s) for s in sessions) or "no sessions"
    console.print(f"  [bold]{owner}[/bold]: {listing}")


@app.command()
def add(
    name: Annotated[str, typer.Argument(help="Student name")],
    sessions: SessionOption = None,
    config_file: ConfigOption = None,
):
    """
    Add a student, optionally with weekly sessions.

    Example:

        tutorslots add "Alex Yeoh" -s "MON 0900 - 1000" -s "THU 1600 - 1700"
    """
    try:
        _, service = _open_service(config_file)
        service.add_owner(name, _parse_sessions(sessions))
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    console.print("[green]✓ Student added[/green]")
    _print_sessions(name.strip(), service.sessions_of(name))


@app.command("add-session")
def add_session(
    name: Annotated[str, typer.Argument(help="Student name")],
    day: Annotated[str, typer.Argument(help="MON, TUE, WED, THU, FRI, SAT or SUN")],
    start: Annotated[str, typer.Argument(help="Start time as HHmm")],
    end: Annotated[str, typer.Argument(help="End time as HHmm")],
    config_file: ConfigOption = None,
):
    """
    Add one weekly session to an existing student.
    """
    try:
        _, service = _open_service(config_file)
        session = Session.create(day.strip().upper(), start.strip(), end.strip())
        service.add_session(name, session)
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    console.print(f"[green]✓ Session {session} added[/green]")
    _print_sessions(name, service.sessions_of(name))


@app.command()
def edit(
    name: Annotated[str, typer.Argument(help="Student name")],
    sessions: SessionOption = None,
    config_file: ConfigOption = None,
):
    """
    Replace all of a student's sessions. Pass no --session to clear them.
    """
    try:
        _, service = _open_service(config_file)
        service.edit_sessions(name, _parse_sessions(sessions))
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    console.print("[green]✓ Sessions updated[/green]")
    _print_sessions(name, service.sessions_of(name))


@app.command()
def remove(
    name: Annotated[str, typer.Argument(help="Student name")],
    config_file: ConfigOption = None,
):
    """
    Remove a student and free their sessions.
    """
    try:
        _, service = _open_service(config_file)
        released = service.remove_owner(name)
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    console.print(f"[green]✓ Removed {name}, freeing {len(released)} session(s)[/green]")


@app.command("list")
def list_students(config_file: ConfigOption = None):
    """
    List all students and their sessions.
    """
    try:
        _, service = _open_service(config_file)
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    owners = service.owners()
    if not owners:
        console.print("[yellow]No students yet.[/yellow]")
        return

    table = Table(title="Students", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold yellow")
    table.add_column("Sessions")
    for owner in owners:
        table.add_row(owner, "\n".join(str(s) for s in service.sessions_of(owner)))

    console.print()
    console.print(table)
    console.print()


@app.command()
def schedule(config_file: ConfigOption = None):
    """
    Show every occupied slot of the week and how many students share it.
    """
    try:
        _, service = _open_service(config_file)
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    registry = service.registry
    if not len(registry):
        console.print("[yellow]The week is empty.[/yellow]")
        return

    table = Table(title="Weekly schedule", show_header=True, header_style="bold cyan")
    table.add_column("Session", style="bold yellow")
    table.add_column("Students", justify="right")
    for session in registry:
        table.add_row(str(session), str(registry.occupancy(session)))

    console.print()
    console.print(table)
    console.print()


@app.command()
def free(
    duration: Annotated[
        Optional[int],
        typer.Argument(help="Slot length in whole hours. Defaults to the configured duration."),
    ] = None,
    config_file: ConfigOption = None,
):
    """
    Find the earliest free slot of the given length in the week.
    """
    try:
        config, service = _open_service(config_file)
        hours = duration if duration is not None else config.defaults.duration_hours
        result = service.earliest_free_slot(hours)
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    console.print(f"The earliest {hours} hour time slot is at: [bold]{result}[/bold]")


@app.command()
def find(
    day: Annotated[Optional[str], typer.Option("--day", "-d", help="MON .. SUN")] = None,
    at: Annotated[Optional[str], typer.Option("--at", help="Time of day as HHmm")] = None,
    from_: Annotated[
        Optional[str], typer.Option("--from", help="Interval start as HHmm. Needs --to.")
    ] = None,
    to: Annotated[
        Optional[str], typer.Option("--to", help="Interval end as HHmm. Needs --from.")
    ] = None,
    config_file: ConfigOption = None,
):
    """
    List students with a session on a day, at a time, or covering an interval.

    Example:

        tutorslots find --day THU --from 1400 --to 1500
    """
    try:
        _, service = _open_service(config_file)
        weekday = Weekday.from_symbol(day.strip().upper()) if day else None
        moment = parse_clock_time(at.strip(), "at") if at else None
        between = None
        if from_ or to:
            if not (from_ and to):
                raise ValueError("--from and --to must be given together")
            between = (parse_clock_time(from_.strip(), "from"), parse_clock_time(to.strip(), "to"))
        owners = service.find_owners(day=weekday, at=moment, between=between)
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    if not owners:
        console.print("[yellow]No matching students.[/yellow]")
        return

    console.print(f"[bold green]{len(owners)} student(s) found:[/bold green]")
    for owner in owners:
        _print_sessions(owner, service.sessions_of(owner))


@app.command()
def clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt.")] = False,
    config_file: ConfigOption = None,
):
    """
    Delete all students and sessions.
    """
    try:
        _, service = _open_service(config_file)
    except (SchedulingError, ValueError, FileNotFoundError) as exc:
        _fail(exc)

    if not yes and not typer.confirm("Are you sure you want to clear all data?"):
        console.print("Clear cancelled.")
        return

    service.clear()
    console.print("[green]✓ All students and sessions cleared.[/green]")


@app.command()
def rules():
    """
    Show the rules every session must follow.
    """
    console.print(SESSION_CONSTRAINTS)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]tutorslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
