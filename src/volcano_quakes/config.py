"""Client configuration with documented defaults and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass

from volcano_quakes.sites import DEFAULT_RADIUS_KM

USGS_QUERY_URL = "https://earthquake.usgs.gov/fdsnws/event/1/query"


@dataclass(frozen=True)
class ClientConfig:
    """Settings for :class:`~volcano_quakes.clients.catalog_client.EarthquakeDataClient`."""

    base_url: str = USGS_QUERY_URL
    cache_ttl_seconds: float = 300.0     # 5 minutes
    rate_limit_seconds: float = 1.0      # minimum spacing between outgoing requests
    max_retries: int = 3                 # total attempts when the API answers 429
    retry_backoff_seconds: float = 1.0   # delay unit; attempt n waits (n + 1) units
    timeout_seconds: float = 15.0
    default_days_back: int = 30
    radius_km: float = DEFAULT_RADIUS_KM

    def __post_init__(self) -> None:
        if self.cache_ttl_seconds < 0:
            raise ValueError("cache_ttl_seconds must be >= 0")
        if self.rate_limit_seconds < 0:
            raise ValueError("rate_limit_seconds must be >= 0")
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.retry_backoff_seconds < 0:
            raise ValueError("retry_backoff_seconds must be >= 0")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if self.default_days_back < 1:
            raise ValueError("default_days_back must be >= 1")
        if self.radius_km <= 0:
            raise ValueError("radius_km must be > 0")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ClientConfig:
        """Build a config from ``VQ_*`` environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            base_url=env.get("VQ_BASE_URL", defaults.base_url),
            cache_ttl_seconds=_env_number(env, "VQ_CACHE_TTL", defaults.cache_ttl_seconds, float),
            rate_limit_seconds=_env_number(env, "VQ_RATE_LIMIT", defaults.rate_limit_seconds, float),
            max_retries=_env_number(env, "VQ_MAX_RETRIES", defaults.max_retries, int),
            retry_backoff_seconds=_env_number(
                env, "VQ_RETRY_BACKOFF", defaults.retry_backoff_seconds, float,
            ),
            timeout_seconds=_env_number(env, "VQ_TIMEOUT", defaults.timeout_seconds, float),
            default_days_back=_env_number(env, "VQ_DAYS_BACK", defaults.default_days_back, int),
            radius_km=_env_number(env, "VQ_RADIUS_KM", defaults.radius_km, float),
        )


def _env_number(env, name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name}={raw!r} is not a valid {cast.__name__}") from None
