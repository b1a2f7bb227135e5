"""Data models handed from the catalog client to presentation code."""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime


@dataclass(frozen=True)
class SeismicEvent:
    """One catalog event near a monitored site, fully normalized."""

    id: str
    time: datetime              # UTC
    magnitude: float
    depth_km: float             # negative above sea level
    latitude: float
    longitude: float
    location_name: str          # queried site, not the event's own place
    place: str
    distance_from_reference_km: float

    def to_dict(self) -> dict:
        d = asdict(self)
        d["time"] = self.time.isoformat()
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> SeismicEvent:
        d = json.loads(raw)
        d["time"] = datetime.fromisoformat(d["time"])
        return cls(**d)


@dataclass(frozen=True)
class CacheEntry:
    """Normalized events stored for one ``(location_name, days_back)`` key."""

    events: tuple[SeismicEvent, ...]
    fetched_at: float           # clock seconds at store time

    def age(self, now: float) -> float:
        return now - self.fetched_at
