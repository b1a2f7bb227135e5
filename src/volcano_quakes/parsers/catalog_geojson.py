"""Parser for the FDSN event service GeoJSON response."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from volcano_quakes.geo import distance_from
from volcano_quakes.models import SeismicEvent
from volcano_quakes.parsers.base import EventParser, is_finite_number
from volcano_quakes.sites import Location

logger = logging.getLogger(__name__)


class CatalogGeoJSONParser(EventParser):
    """Parse a GeoJSON feature collection → list of SeismicEvent."""

    def parse(self, raw: Any, location: Location) -> list[SeismicEvent]:
        return normalize_catalog(raw, location)


def normalize_catalog(raw: Any, location: Location) -> list[SeismicEvent]:
    """Filter and map raw catalog features to SeismicEvents for ``location``.

    A response without a feature list yields an empty list. Features missing
    a numeric magnitude, time, three numeric coordinates or an id are dropped.
    """
    features = raw.get("features") if isinstance(raw, dict) else None
    if not isinstance(features, list):
        logger.warning("No earthquake features found for %s", location.name)
        return []

    metadata = raw.get("metadata")
    if isinstance(metadata, dict) and "count" in metadata:
        logger.info("Found %s earthquakes for %s", metadata["count"], location.name)

    events: list[SeismicEvent] = []
    dropped = 0
    for feature in features:
        event = _parse_feature(feature, location)
        if event is None:
            dropped += 1
            continue
        events.append(event)

    if dropped:
        logger.debug("%s: dropped %d malformed feature(s)", location.name, dropped)
    return events


def _parse_feature(feature: Any, location: Location) -> SeismicEvent | None:
    if not isinstance(feature, dict):
        return None
    props = feature.get("properties")
    geometry = feature.get("geometry")
    if not isinstance(props, dict) or not isinstance(geometry, dict):
        return None

    mag = props.get("mag")
    if not is_finite_number(mag):
        return None

    coords = geometry.get("coordinates")
    if not isinstance(coords, list) or len(coords) != 3:
        return None
    if not all(is_finite_number(c) for c in coords):
        return None

    event_id = feature.get("id")
    if event_id is None or event_id == "":
        return None

    time_ms = props.get("time")
    if not is_finite_number(time_ms):
        return None
    try:
        origin_time = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None

    longitude, latitude, depth = (float(c) for c in coords)
    return SeismicEvent(
        id=str(event_id),
        time=origin_time,
        magnitude=float(mag),
        depth_km=depth,
        latitude=latitude,
        longitude=longitude,
        location_name=location.name,
        place=str(props.get("place") or ""),
        distance_from_reference_km=distance_from(location, latitude, longitude),
    )
