"""Expiring station cache over a key-value store."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import ValidationError

from streamflow_stations.domain.contracts.station_cache import StationCacheProtocol
from streamflow_stations.domain.models.cache_entry import CacheEntry
from streamflow_stations.domain.models.errors import CacheCorrupt

if TYPE_CHECKING:
    from streamflow_stations.domain.models.station import StationRecord
    from streamflow_stations.domain.ports.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "streamflow_station_cache_"
CACHE_SCHEMA_VERSION = "v6"
CACHE_TTL_SECONDS = 30 * 60


class StationCache(StationCacheProtocol):
    """Best-effort station cache with lazy expiry.

    Entries are stored as JSON ``{"data": [...], "timestamp": <epoch millis>}``
    under ``<prefix><schema version>_<fingerprint>``. Bumping the schema
    version orphans every older entry. Expired or unreadable entries are
    removed when they are next read. No method raises: storage problems
    degrade to a cache miss or a skipped write.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        key_prefix: str = CACHE_KEY_PREFIX,
        schema_version: str = CACHE_SCHEMA_VERSION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Backing key-value store.
            ttl_seconds: Maximum age of a usable entry.
            key_prefix: Namespace shared by every key.
            schema_version: Entry format version embedded in every key.
            clock: Returns the current epoch time in seconds.
        """
        self._store = store
        self._ttl_millis = int(ttl_seconds * 1000)
        self._namespace = f"{key_prefix}{schema_version}_"
        self._clock = clock

    def key_for(self, fingerprint: str) -> str:
        """Storage key for a fingerprint."""
        return f"{self._namespace}{fingerprint}"

    def _now_millis(self) -> int:
        return int(self._clock() * 1000)

    @staticmethod
    def _decode(raw: bytes) -> CacheEntry:
        try:
            return CacheEntry.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            raise CacheCorrupt(str(e)) from e

    def _evict(self, key: str) -> None:
        try:
            self._store.delete(key)
        except Exception as e:
            logger.debug(f"Could not evict cache key {key}: {e}")

    def get(self, fingerprint: str) -> list[StationRecord] | None:
        key = self.key_for(fingerprint)
        try:
            raw = self._store.get(key)
        except Exception as e:
            logger.debug(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None

        try:
            entry = self._decode(raw)
        except CacheCorrupt as e:
            logger.debug(f"Evicting corrupt cache entry {key}: {e}")
            self._evict(key)
            return None

        if entry.age_millis(self._now_millis()) < self._ttl_millis:
            return entry.data

        logger.debug(f"Cache entry {key} expired")
        self._evict(key)
        return None

    def put(self, fingerprint: str, stations: list[StationRecord]) -> None:
        key = self.key_for(fingerprint)
        try:
            entry = CacheEntry(data=stations, timestamp=self._now_millis())
            written = self._store.set(key, entry.model_dump_json().encode("utf-8"))
        except Exception as e:
            logger.debug(f"Cache write failed for {key}: {e}")
            return
        if not written:
            logger.debug(f"Cache store refused write for {key}")
