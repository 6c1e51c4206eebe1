"""Station cache adapters."""

from streamflow_stations.adapters.cache.station_cache import (
    CACHE_KEY_PREFIX,
    CACHE_SCHEMA_VERSION,
    CACHE_TTL_SECONDS,
    StationCache,
)

__all__ = ["CACHE_KEY_PREFIX", "CACHE_SCHEMA_VERSION", "CACHE_TTL_SECONDS", "StationCache"]
