"""Great-circle distance helpers."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from volcano_quakes.sites import Location

EARTH_RADIUS_KM = 6371.0


def haversine_km(
    lat1: float, lon1: float, lat2: float, lon2: float,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """Great-circle distance between two points in kilometers.

    Inputs are decimal degrees. The sphere defaults to the mean Earth radius.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = (
        math.sin(dphi / 2) * math.sin(dphi / 2)
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) * math.sin(dlambda / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return radius_km * c


def distance_from(location: Location, latitude: float, longitude: float) -> float:
    """Distance of a point from a monitored site's reference coordinates."""
    return haversine_km(location.latitude, location.longitude, latitude, longitude)
