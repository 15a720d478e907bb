"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional, Union

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.file_source import FileSnapshotSource
from ..adapters.http_source import HttpSnapshotSource
from ..config import AppConfig, get_default_config_path
from ..domain.civil_time import now_instant
from ..domain.exceptions import ConfigurationError, FreeBusyError, SnapshotError
from ..domain.formatting import format_date_header, format_hour, format_instant_iso
from ..domain.grid import FullCell, PartialCell, busy_minutes_in_cell
from ..domain.models import OwnerDay
from ..domain.timezones import SUPPORTED_VIEWER_TIME_ZONES, is_supported_viewer_time_zone, label_for_time_zone
from ..schemas import FreeBusySnapshot
from ..services.calendar_view import CalendarView, CalendarViewService, CalendarWeek
from ..services.snapshot_cache import SnapshotCache

app = typer.Typer(
    name="freebusy",
    help="Show a calendar owner's free/busy availability in your time zone",
    add_completion=False
)

console = Console()

SnapshotSource = Union[FileSnapshotSource, HttpSnapshotSource]

CELL_AVAILABLE = "█"
CELL_PARTIAL = "▄"
CELL_UNAVAILABLE = "·"
CELL_BUSY = "B"


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Free/busy availability viewer.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the given config file, or the default one when it exists.

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    config_path = config_file or get_default_config_path()
    if config_file is None and not config_path.exists():
        return AppConfig()

    try:
        return AppConfig.load_from_yaml(config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise ConfigurationError(str(exc)) from exc


def _build_source(config: AppConfig, snapshot: Optional[Path], url: Optional[str]) -> SnapshotSource:
    """Command-line options win over the configured feed; the bundled sample is the fallback."""
    if snapshot is not None and url:
        raise ConfigurationError("Use either --snapshot or --url, not both.")

    if url:
        return HttpSnapshotSource(url, timeout=config.feed.timeout_seconds)
    if snapshot is not None:
        return FileSnapshotSource(snapshot)
    if config.feed.url:
        return HttpSnapshotSource(config.feed.url, timeout=config.feed.timeout_seconds)
    return FileSnapshotSource(config.feed.path)


async def _refresh_once(source: SnapshotSource) -> FreeBusySnapshot:
    cache = SnapshotCache(source)
    state = await cache.refresh()
    if state.snapshot is None:
        raise SnapshotError(state.error or "No snapshot available.")
    return state.snapshot


def _fetch_snapshot(source: SnapshotSource) -> FreeBusySnapshot:
    return asyncio.run(_refresh_once(source))


def _viewer_zone(config: AppConfig, snapshot: FreeBusySnapshot, tz: Optional[str]) -> str:
    if tz is not None:
        if not is_supported_viewer_time_zone(tz):
            raise ConfigurationError(
                f"Unsupported time zone: {tz}. Run 'freebusy zones' to list the supported zones."
            )
        return tz
    return config.viewer_zone_for(snapshot.owner_time_zone)


def _service(config: AppConfig) -> CalendarViewService:
    return CalendarViewService(
        default_start_hour=config.grid.default_start_hour,
        default_end_hour=config.grid.default_end_hour,
        cell_height=config.grid.cell_height,
    )


def _day_style(view: CalendarView, day: OwnerDay) -> Optional[str]:
    """Padding days and days without working hours are greyed out."""
    if not day.in_window:
        return "dim"
    if view.schedule.configured and not view.schedule.has_weekday(day.iso_weekday):
        return "dim"
    return None


def _week_table(view: CalendarView, week: CalendarWeek, cell_height: float) -> Table:
    first, last = week.days[0], week.days[-1]
    table = Table(
        title=f"{format_date_header(first.start, view.owner_zone)} - {format_date_header(last.start, view.owner_zone)}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Time", style="dim", justify="right")
    for day in week.days:
        table.add_column(
            format_date_header(day.start, view.owner_zone),
            justify="center",
            style=_day_style(view, day),
        )

    for hour in week.hours():
        row = [format_hour(hour)]
        for index in range(len(week.days)):
            busy = busy_minutes_in_cell(week.busy_blocks(index), hour, week.bounds.start_hour, cell_height)
            cell = week.cell(index, hour)
            if busy > 0 and week.days[index].in_window:
                row.append(f"[red]{CELL_BUSY}[/red]")
            elif isinstance(cell, FullCell):
                row.append(f"[green]{CELL_AVAILABLE}[/green]")
            elif isinstance(cell, PartialCell):
                row.append(f"[yellow]{CELL_PARTIAL}[/yellow]")
            else:
                row.append(CELL_UNAVAILABLE)
        table.add_row(*row)

    return table


@app.command()
def export(
    snapshot: Annotated[Optional[Path], typer.Option("--snapshot", "-s", help="Snapshot JSON file. Defaults to the configured feed.")] = None,
    url: Annotated[Optional[str], typer.Option("--url", help="Free/busy API endpoint.")] = None,
    tz: Annotated[Optional[str], typer.Option("--tz", help="Viewer time zone (see 'freebusy zones').")] = None,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Write the export to this file.")] = None,
    save: Annotated[bool, typer.Option("--save", help="Write the export using the suggested file name.")] = False,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
):
    """
    Export availability as plain text.

    Examples:

        freebusy export
        freebusy export --snapshot feed.json --tz America/Chicago
        freebusy export --url https://example.com/freebusy --save
    """
    try:
        config = _load_config(config_file)
        data = _fetch_snapshot(_build_source(config, snapshot, url))
        viewer_zone = _viewer_zone(config, data, tz)

        result = _service(config).build_export(data, viewer_zone, generated_at=now_instant())

        target = output if output is not None else (Path(result.filename) if save else None)
        if target is None:
            typer.echo(result.text)
            return

        target.write_text(result.text + "\n", encoding="utf-8")
        console.print(f"[green]✓ Availability written to {target}[/green]")

    except FreeBusyError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except OSError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def grid(
    snapshot: Annotated[Optional[Path], typer.Option("--snapshot", "-s", help="Snapshot JSON file. Defaults to the configured feed.")] = None,
    url: Annotated[Optional[str], typer.Option("--url", help="Free/busy API endpoint.")] = None,
    tz: Annotated[Optional[str], typer.Option("--tz", help="Viewer time zone (see 'freebusy zones').")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
):
    """
    Show the weekly availability grid.
    """
    try:
        config = _load_config(config_file)
        data = _fetch_snapshot(_build_source(config, snapshot, url))
        viewer_zone = _viewer_zone(config, data, tz)
        view = _service(config).build_view(data, viewer_zone)
    except FreeBusyError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if view.is_empty():
        console.print("[yellow]⚠ No days to show for this window.[/yellow]")
        return

    console.print(
        f"\n[bold cyan]Availability[/bold cyan] in {label_for_time_zone(viewer_zone)} time ({viewer_zone})"
    )
    generated_at = CalendarViewService.snapshot_generated_at(data)
    if generated_at is not None:
        console.print(f"[dim]Snapshot generated {format_instant_iso(generated_at)}[/dim]")

    for week in view.weeks:
        console.print()
        console.print(_week_table(view, week, config.grid.cell_height))

    console.print(
        f"\n{CELL_AVAILABLE} available   {CELL_PARTIAL} partly available   "
        f"{CELL_UNAVAILABLE} unavailable   {CELL_BUSY} busy\n"
    )


@app.command()
def watch(
    snapshot: Annotated[Optional[Path], typer.Option("--snapshot", "-s", help="Snapshot JSON file. Defaults to the configured feed.")] = None,
    url: Annotated[Optional[str], typer.Option("--url", help="Free/busy API endpoint.")] = None,
    tz: Annotated[Optional[str], typer.Option("--tz", help="Viewer time zone (see 'freebusy zones').")] = None,
    interval: Annotated[Optional[float], typer.Option("--interval", help="Seconds between refreshes. Defaults to the configured refresh interval.")] = None,
    iterations: Annotated[Optional[int], typer.Option("--iterations", "-n", help="Stop after this many refreshes.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
):
    """
    Refresh the snapshot periodically and print the export after each refresh.
    """
    try:
        config = _load_config(config_file)
        source = _build_source(config, snapshot, url)
        if tz is not None and not is_supported_viewer_time_zone(tz):
            raise ConfigurationError(f"Unsupported time zone: {tz}")
    except FreeBusyError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    delay = interval if interval is not None else config.feed.refresh_interval_minutes * 60
    service = _service(config)

    async def _watch() -> None:
        cache = SnapshotCache(source)
        worker = asyncio.create_task(cache.run())
        try:
            count = 0
            while iterations is None or count < iterations:
                cache.request_refresh()
                await cache.wait_idle()
                count += 1

                current = cache.snapshot
                if current is None:
                    console.print(f"[bold red]Error:[/bold red] {cache.error}")
                else:
                    viewer_zone = tz or config.viewer_zone_for(current.owner_time_zone)
                    result = service.build_export(current, viewer_zone, generated_at=now_instant())
                    typer.echo(result.text)

                if iterations is None or count < iterations:
                    await asyncio.sleep(delay)
        finally:
            await cache.stop()
            await worker

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped.[/yellow]")


@app.command()
def zones():
    """
    List the supported viewer time zones.
    """
    table = Table(
        title="Supported time zones",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Zone", style="bold yellow")
    table.add_column("Label", style="dim")

    for option in SUPPORTED_VIEWER_TIME_ZONES:
        table.add_row(option.id, option.label)

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]freebusy[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
