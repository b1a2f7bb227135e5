"""Live terminal dashboard for seismic activity at the monitored sites."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from volcano_quakes.analysis import (
    depth_distribution,
    magnitude_distribution,
    sort_by_time,
    summarize,
)
from volcano_quakes.clients.catalog_client import EarthquakeDataClient
from volcano_quakes.config import ClientConfig
from volcano_quakes.errors import FetchFailure
from volcano_quakes.models import SeismicEvent
from volcano_quakes.sites import Location

logger = logging.getLogger(__name__)

console = Console()

BAR_WIDTH = 30


@dataclass
class Snapshot:
    """Events gathered for one refresh, plus any site that failed to update."""

    events: list[SeismicEvent] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    stale: set[str] = field(default_factory=set)
    taken_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def mag_color(mag: float) -> str:
    if mag >= 4.0:
        return "red"
    if mag >= 2.5:
        return "yellow"
    return "green"


async def collect(
    client: EarthquakeDataClient, locations: list[Location], days_back: int,
) -> Snapshot:
    """Fetch every location, falling back to the last cached result on failure."""
    snapshot = Snapshot()
    results = await asyncio.gather(
        *(client.get_events(loc, days_back) for loc in locations),
        return_exceptions=True,
    )
    for loc, result in zip(locations, results):
        if isinstance(result, FetchFailure):
            snapshot.errors[loc.name] = str(result)
            stale = client.cache.peek(client.cache_key(loc, days_back))
            if stale is not None:
                logger.warning("%s: refresh failed, showing cached events: %s", loc.name, result)
                snapshot.events.extend(stale.events)
                snapshot.stale.add(loc.name)
            continue
        if isinstance(result, BaseException):
            raise result
        snapshot.events.extend(result)
    return snapshot


def build_events_table(events: list[SeismicEvent], limit: int, title: str = "Recent events") -> Table:
    table = Table(title=title, expand=True)
    table.add_column("Mag", style="bold", width=6, justify="center")
    table.add_column("Site")
    table.add_column("Place")
    table.add_column("Depth (km)", justify="right", width=11)
    table.add_column("Dist (km)", justify="right", width=10)
    table.add_column("Time (UTC)", width=18)

    for e in sort_by_time(events)[:limit]:
        color = mag_color(e.magnitude)
        table.add_row(
            f"[{color}]{e.magnitude:.1f}[/]",
            e.location_name,
            e.place or "-",
            f"{e.depth_km:.1f}",
            f"{e.distance_from_reference_km:.1f}",
            f"{e.time:%Y-%m-%d %H:%M}",
        )
    return table


def build_summary_panel(snapshot: Snapshot, days_back: int) -> Panel:
    summary = summarize(snapshot.events)
    lines = [f"Events (last {days_back} days): [bold]{summary.count}[/]"]
    if summary.strongest is not None:
        lines.append(
            f"Strongest: [bold {mag_color(summary.strongest.magnitude)}]"
            f"M{summary.strongest.magnitude:.1f}[/] — {summary.strongest.place or summary.strongest.location_name}"
        )
        lines.append(
            f"Mean magnitude: {summary.mean_magnitude:.2f}  "
            f"Depth range: {summary.shallowest_km:.1f}–{summary.deepest_km:.1f} km"
        )
    for name, message in snapshot.errors.items():
        suffix = " (showing cached data)" if name in snapshot.stale else ""
        lines.append(f"[red]{message}{suffix}[/]")
    lines.append(f"[dim]Last update: {snapshot.taken_at:%H:%M:%S UTC}[/]")

    border = "red" if snapshot.errors else "blue"
    return Panel("\n".join(lines), title="Summary", border_style=border)


def build_histogram(rows: list[tuple[str, int]], color: str) -> Group:
    peak = max((count for _, count in rows), default=0)
    lines = []
    for label, count in rows:
        width = round(BAR_WIDTH * count / peak) if peak else 0
        line = Text(f"{label:>9} ")
        line.append("█" * width, style=color)
        line.append(f" {count}")
        lines.append(line)
    return Group(*lines)


def build_distribution_panels(events: list[SeismicEvent]) -> tuple[Panel, Panel]:
    mags = [(f"M{mag:.1f}", count) for mag, count in magnitude_distribution(events)]
    depths = [(f"{b.label} km", b.count) for b in depth_distribution(events)]
    return (
        Panel(build_histogram(mags, "cyan"), title="Magnitude distribution", border_style="cyan"),
        Panel(build_histogram(depths, "magenta"), title="Depth distribution", border_style="magenta"),
    )


def render(snapshot: Snapshot, days_back: int, limit: int) -> Layout:
    layout = Layout()
    layout.split_column(
        Layout(name="stats", size=6 + len(snapshot.errors)),
        Layout(name="charts", size=14),
        Layout(name="table"),
    )
    layout["charts"].split_row(Layout(name="magnitude"), Layout(name="depth"))

    mag_panel, depth_panel = build_distribution_panels(snapshot.events)
    layout["stats"].update(build_summary_panel(snapshot, days_back))
    layout["magnitude"].update(mag_panel)
    layout["depth"].update(depth_panel)
    layout["table"].update(build_events_table(snapshot.events, limit))
    return layout


async def _run(
    locations: list[Location], days_back: int, refresh: int, limit: int, config: ClientConfig,
) -> None:
    async with EarthquakeDataClient(config) as client:
        with Live(console=console, refresh_per_second=1, screen=True) as live:
            while True:
                snapshot = await collect(client, locations, days_back)
                live.update(render(snapshot, days_back, limit))
                await asyncio.sleep(refresh)


def run_dashboard(
    locations: list[Location],
    days_back: int = 30,
    refresh: int = 300,
    limit: int = 25,
    config: ClientConfig | None = None,
) -> None:
    """Run a live-updating dashboard in the terminal until interrupted."""
    try:
        asyncio.run(_run(locations, days_back, refresh, limit, config or ClientConfig.from_env()))
    except KeyboardInterrupt:
        console.print("Dashboard stopped")
