"""Chart-ready aggregations over normalized events."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from volcano_quakes.models import SeismicEvent

DEPTH_BIN_KM = 10.0


@dataclass(frozen=True)
class DepthBin:
    """Half-open depth range ``[lower_km, upper_km)`` and its event count."""

    lower_km: float
    upper_km: float
    count: int

    @property
    def label(self) -> str:
        return f"{self.lower_km:g}-{self.upper_km:g}"


@dataclass(frozen=True)
class EventSummary:
    count: int
    max_magnitude: Optional[float] = None
    mean_magnitude: Optional[float] = None
    strongest: Optional[SeismicEvent] = None
    nearest: Optional[SeismicEvent] = None
    shallowest_km: Optional[float] = None
    deepest_km: Optional[float] = None
    latest_time: Optional[datetime] = None


def sort_by_time(events: list[SeismicEvent], newest_first: bool = True) -> list[SeismicEvent]:
    return sorted(events, key=lambda e: e.time, reverse=newest_first)


def magnitude_distribution(events: list[SeismicEvent]) -> list[tuple[float, int]]:
    """Event count per distinct magnitude value, ascending by magnitude."""
    counts = Counter(e.magnitude for e in events)
    return sorted(counts.items())


def depth_distribution(events: list[SeismicEvent], bin_km: float = DEPTH_BIN_KM) -> list[DepthBin]:
    """Histogram of event depths in ``bin_km`` wide bins starting at 0 km.

    Bins run up to ``ceil(max_depth / bin_km) * bin_km``, so the last bin is
    the one that starts at that bound. Events above sea level are not counted.
    """
    if bin_km <= 0:
        raise ValueError("bin_km must be positive")
    if not events:
        return []

    max_depth = max(e.depth_km for e in events)
    upper_bound = max(math.ceil(max_depth / bin_km), 0) * bin_km
    n_bins = int(round(upper_bound / bin_km)) + 1

    counts = [0] * n_bins
    for e in events:
        if e.depth_km < 0:
            continue
        idx = int(e.depth_km // bin_km)
        if idx < n_bins:
            counts[idx] += 1

    return [
        DepthBin(lower_km=i * bin_km, upper_km=(i + 1) * bin_km, count=counts[i])
        for i in range(n_bins)
    ]


def magnitude_timeline(events: list[SeismicEvent]) -> list[tuple[datetime, float]]:
    """(time, magnitude) pairs, oldest first."""
    return [(e.time, e.magnitude) for e in sort_by_time(events, newest_first=False)]


def summarize(events: list[SeismicEvent]) -> EventSummary:
    if not events:
        return EventSummary(count=0)

    strongest = max(events, key=lambda e: e.magnitude)
    nearest = min(events, key=lambda e: e.distance_from_reference_km)
    depths = [e.depth_km for e in events]
    return EventSummary(
        count=len(events),
        max_magnitude=strongest.magnitude,
        mean_magnitude=sum(e.magnitude for e in events) / len(events),
        strongest=strongest,
        nearest=nearest,
        shallowest_km=min(depths),
        deepest_km=max(depths),
        latest_time=max(e.time for e in events),
    )
