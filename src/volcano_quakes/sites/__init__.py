"""Registry of monitored volcanic sites."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_RADIUS_KM = 20.0


@dataclass(frozen=True)
class Location:
    """A monitored site and the search radius used for catalog queries."""

    name: str
    latitude: float
    longitude: float
    radius_km: float
    key: str = ""
    color: str = "white"

    def __post_init__(self) -> None:
        if not self.radius_km > 0:
            raise ValueError(f"{self.name}: radius_km must be positive, got {self.radius_km}")


def build_sites(radius_km: float = DEFAULT_RADIUS_KM) -> dict[str, Location]:
    """Return the site registry with every site searched within ``radius_km``."""
    return {
        "campi": Location(
            name="Campi Flegrei",
            latitude=40.827,
            longitude=14.139,
            radius_km=radius_km,
            key="campi",
            color="blue",
        ),
        "santorini": Location(
            name="Santorini",
            latitude=36.4,
            longitude=25.396,
            radius_km=radius_km,
            key="santorini",
            color="red",
        ),
    }


SITES: dict[str, Location] = build_sites()

CAMPI_FLEGREI = SITES["campi"]
SANTORINI = SITES["santorini"]


def get_site(key: str, sites: dict[str, Location] | None = None) -> Location:
    """Look a site up by its short key (``campi``, ``santorini``)."""
    registry = SITES if sites is None else sites
    try:
        return registry[key]
    except KeyError:
        raise KeyError(f"Unknown site '{key}'. Choose from: {list(registry.keys())}") from None
