"""Async client for the USGS event query endpoint with caching, throttling and 429 backoff."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable

import httpx

from volcano_quakes.cache import ResponseCache
from volcano_quakes.config import ClientConfig
from volcano_quakes.errors import FetchFailure
from volcano_quakes.models import SeismicEvent
from volcano_quakes.parsers import PARSER_MAP
from volcano_quakes.sites import Location, build_sites, get_site

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RateLimiter:
    """Minimum spacing between consecutive outgoing requests.

    The read-compare-sleep-record sequence runs under a lock, so overlapping
    callers queue up instead of sliding through together.
    """

    def __init__(self, min_interval: float, clock: Clock = time.monotonic,
                 sleep: Sleep = asyncio.sleep):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = asyncio.Lock()

    @property
    def last_call(self) -> float | None:
        return self._last_call

    async def acquire(self) -> None:
        async with self._lock:
            if self._last_call is not None:
                elapsed = self._clock() - self._last_call
                if elapsed < self.min_interval:
                    wait = self.min_interval - elapsed
                    logger.debug("Throttling request for %.3fs", wait)
                    await self._sleep(wait)
            self._last_call = self._clock()


class EarthquakeDataClient:
    """Fetches recent events around monitored sites from the catalog endpoint.

    Each instance owns its cache, throttle and HTTP connection pool, so
    several clients can run side by side without sharing state. The clock,
    sleep function, wall-clock source and HTTP transport are injectable for
    tests.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        now: Callable[[], datetime] = _utc_now,
        sites: dict[str, Location] | None = None,
    ):
        self.config = config or ClientConfig()
        self.sites = sites if sites is not None else build_sites(self.config.radius_km)
        self.cache = ResponseCache(self.config.cache_ttl_seconds, clock=clock)
        self.parser = PARSER_MAP["geojson"]
        self._rate_limiter = RateLimiter(self.config.rate_limit_seconds, clock=clock, sleep=sleep)
        self._sleep = sleep
        self._now = now
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> EarthquakeDataClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @staticmethod
    def cache_key(location: Location, days_back: int) -> tuple[str, int]:
        return (location.name, days_back)

    async def get_events(self, location: Location, days_back: int | None = None) -> list[SeismicEvent]:
        """Return events within ``location.radius_km`` over the last ``days_back`` days.

        Served from the cache while the stored entry is younger than the
        configured TTL. Otherwise the request is throttled, issued, retried on
        HTTP 429, normalized and stored.

        Raises:
            FetchFailure: on network errors, non-success statuses, exhausted
                429 retries or an undecodable body.
        """
        if days_back is None:
            days_back = self.config.default_days_back
        key = self.cache_key(location, days_back)

        entry = self.cache.get(key)
        if entry is not None:
            return list(entry.events)

        params = self._build_params(location, days_back)
        try:
            payload = await self._request_with_retry(location, params)
            events = self.parser.parse(payload, location)
        except FetchFailure as exc:
            logger.error("Error fetching data for %s: %s", location.name, exc)
            raise
        except Exception as exc:
            logger.error("Error fetching data for %s: %s", location.name, exc)
            raise FetchFailure(
                f"Failed to fetch earthquake data for {location.name}: {exc}",
                location_name=location.name,
                cause=exc,
            ) from exc

        self.cache.put(key, events)
        logger.info("%s: %d event(s) over the last %d day(s)", location.name, len(events), days_back)
        return events

    def _build_params(self, location: Location, days_back: int) -> dict[str, str]:
        start_time = self._now() - timedelta(days=days_back)
        return {
            "format": "geojson",
            "latitude": str(location.latitude),
            "longitude": str(location.longitude),
            "maxradiuskm": str(location.radius_km),
            "starttime": start_time.strftime("%Y-%m-%dT%H:%M:%S"),
            "orderby": "time",
        }

    async def _request_with_retry(self, location: Location, params: dict[str, str]) -> Any:
        """Issue the query, backing off linearly while the API answers 429."""
        client = await self._get_client()
        max_attempts = self.config.max_retries
        last_exc: httpx.HTTPStatusError | None = None

        for attempt in range(max_attempts):
            await self._rate_limiter.acquire()
            logger.info(
                "%s: requesting catalog (attempt %d/%d)", location.name, attempt + 1, max_attempts,
            )
            resp = await client.get(self.config.base_url, params=params)

            if resp.status_code == 429:
                try:
                    resp.raise_for_status()
                except httpx.HTTPStatusError as exc:
                    last_exc = exc
                if attempt + 1 < max_attempts:
                    backoff = (attempt + 1) * self.config.retry_backoff_seconds
                    logger.warning(
                        "%s: rate limited (attempt %d/%d), retrying in %.1fs",
                        location.name, attempt + 1, max_attempts, backoff,
                    )
                    await self._sleep(backoff)
                continue

            # FDSN answers 204 No Content when no events match
            if resp.status_code == 204:
                return {"type": "FeatureCollection", "features": []}

            try:
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise FetchFailure(
                    f"Failed to fetch earthquake data for {location.name}",
                    location_name=location.name,
                    status_code=resp.status_code,
                    cause=exc,
                ) from exc
            return resp.json()

        raise FetchFailure(
            f"Failed to fetch earthquake data for {location.name}: "
            f"still rate limited after {max_attempts} attempts",
            location_name=location.name,
            status_code=429,
            cause=last_exc,
        ) from last_exc

    async def get_site_events(self, key: str, days_back: int | None = None) -> list[SeismicEvent]:
        return await self.get_events(get_site(key, self.sites), days_back)

    async def get_campi_flegrei_events(self, days_back: int | None = None) -> list[SeismicEvent]:
        return await self.get_site_events("campi", days_back)

    async def get_santorini_events(self, days_back: int | None = None) -> list[SeismicEvent]:
        return await self.get_site_events("santorini", days_back)

    async def get_all_events(self, days_back: int | None = None) -> list[SeismicEvent]:
        """Both sites fetched concurrently, Campi Flegrei events first."""
        campi, santorini = await asyncio.gather(
            self.get_campi_flegrei_events(days_back),
            self.get_santorini_events(days_back),
        )
        return [*campi, *santorini]
