"""HTTP clients for upstream earthquake catalogs."""

from volcano_quakes.clients.catalog_client import EarthquakeDataClient, RateLimiter

__all__ = ["EarthquakeDataClient", "RateLimiter"]
