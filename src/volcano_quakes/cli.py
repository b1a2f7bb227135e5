"""CLI entrypoint for volcano-quakes."""

from __future__ import annotations

import asyncio
import logging

import click
from rich.console import Console
from rich.table import Table

from volcano_quakes.analysis import depth_distribution, magnitude_distribution, summarize
from volcano_quakes.clients.catalog_client import EarthquakeDataClient
from volcano_quakes.config import ClientConfig
from volcano_quakes.dashboard import build_events_table
from volcano_quakes.errors import FetchFailure
from volcano_quakes.models import SeismicEvent
from volcano_quakes.sites import Location, build_sites

console = Console()

SITE_CHOICES = click.Choice(["campi", "santorini", "all"])


def _load_config() -> ClientConfig:
    try:
        return ClientConfig.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


def _select(site: str, config: ClientConfig) -> list[Location]:
    sites = build_sites(config.radius_km)
    if site == "all":
        return list(sites.values())
    return [sites[site]]


async def _fetch(locations: list[Location], days_back: int, config: ClientConfig) -> list[SeismicEvent]:
    async with EarthquakeDataClient(config) as client:
        results = await asyncio.gather(*(client.get_events(loc, days_back) for loc in locations))
    return [e for events in results for e in events]


def _fetch_or_exit(site: str, days: int | None) -> tuple[list[SeismicEvent], int]:
    config = _load_config()
    days_back = days or config.default_days_back
    try:
        events = asyncio.run(_fetch(_select(site, config), days_back, config))
    except FetchFailure as exc:
        console.print(f"[red]Error: {exc}[/]")
        raise SystemExit(1)
    return events, days_back


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool):
    """Volcano Quakes — seismic activity at Campi Flegrei and Santorini."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@cli.command()
def sites():
    """List the monitored sites."""
    config = _load_config()
    table = Table(title="Monitored sites")
    table.add_column("Key", style="bold")
    table.add_column("Name")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    table.add_column("Radius (km)", justify="right")

    for key, loc in build_sites(config.radius_km).items():
        table.add_row(key, f"[{loc.color}]{loc.name}[/]", f"{loc.latitude:.3f}",
                      f"{loc.longitude:.3f}", f"{loc.radius_km:g}")

    console.print(table)


@cli.command()
@click.option("--site", default="all", type=SITE_CHOICES)
@click.option("--days", default=None, type=click.IntRange(min=1), help="Days of history to fetch.")
@click.option("--limit", default=20, help="Max results to display.")
@click.option("--json", "as_json", is_flag=True, help="Print events as JSON lines.")
def recent(site: str, days: int | None, limit: int, as_json: bool):
    """Show recent earthquakes near the selected site."""
    events, days_back = _fetch_or_exit(site, days)

    if as_json:
        for e in sorted(events, key=lambda e: e.time, reverse=True)[:limit]:
            click.echo(e.to_json())
        return

    console.print(build_events_table(events, limit, title=f"Recent earthquakes ({days_back} days)"))


@cli.command()
@click.option("--site", default="all", type=SITE_CHOICES)
@click.option("--days", default=None, type=click.IntRange(min=1), help="Days of history to fetch.")
def stats(site: str, days: int | None):
    """Summary statistics and distributions."""
    events, days_back = _fetch_or_exit(site, days)
    summary = summarize(events)

    console.print(f"Events (last {days_back} days): [bold]{summary.count}[/]")
    if summary.count == 0:
        return
    console.print(
        f"Max magnitude: [bold]{summary.max_magnitude:.1f}[/]  "
        f"Mean magnitude: {summary.mean_magnitude:.2f}"
    )
    console.print(
        f"Nearest: {summary.nearest.distance_from_reference_km:.1f} km "
        f"from {summary.nearest.location_name}"
    )

    mags = Table(title="Magnitude distribution")
    mags.add_column("Magnitude", justify="right")
    mags.add_column("Count", justify="right")
    for mag, count in magnitude_distribution(events):
        mags.add_row(f"{mag:.1f}", str(count))
    console.print(mags)

    depths = Table(title="Depth distribution")
    depths.add_column("Depth (km)", justify="right")
    depths.add_column("Count", justify="right")
    for b in depth_distribution(events):
        depths.add_row(b.label, str(b.count))
    console.print(depths)


@cli.command()
@click.option("--site", default="all", type=SITE_CHOICES)
@click.option("--days", default=None, type=click.IntRange(min=1), help="Days of history to fetch.")
@click.option("--limit", default=25, help="Max results to display.")
@click.option("--refresh", default=300, help="Refresh interval in seconds.")
def dashboard(site: str, days: int | None, limit: int, refresh: int):
    """Live auto-refreshing dashboard."""
    from volcano_quakes.dashboard import run_dashboard

    config = _load_config()
    run_dashboard(
        _select(site, config),
        days_back=days or config.default_days_back,
        refresh=refresh,
        limit=limit,
        config=config,
    )


def main():
    cli()


if __name__ == "__main__":
    main()
