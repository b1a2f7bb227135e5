"""Shared fixtures: a controllable clock and sample catalog payloads."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from volcano_quakes.sites import Location

FIXED_NOW = datetime(2024, 2, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock that only moves when told to, or when something sleeps on it."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


def make_feature(
    event_id: str = "us7000abcd",
    mag=2.1,
    coords=(14.15, 40.83, 2.5),
    time_ms=1707998400000,  # 2024-02-15 12:00:00 UTC
    place="2 km SW of Pozzuoli, Italy",
) -> dict:
    return {
        "type": "Feature",
        "id": event_id,
        "properties": {"mag": mag, "place": place, "time": time_ms},
        "geometry": {"type": "Point", "coordinates": list(coords) if coords is not None else None},
    }


def make_collection(*features: dict, count: int | None = None) -> dict:
    body = {"type": "FeatureCollection", "features": list(features)}
    if count is not None:
        body["metadata"] = {"count": count}
    return body


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def campi() -> Location:
    return Location(name="Campi Flegrei", latitude=40.827, longitude=14.139, radius_km=20.0, key="campi")


@pytest.fixture
def santorini() -> Location:
    return Location(name="Santorini", latitude=36.4, longitude=25.396, radius_km=20.0, key="santorini")
