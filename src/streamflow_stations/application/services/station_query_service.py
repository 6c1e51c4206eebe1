"""Application service (use cases) for station lookups."""

import asyncio
import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from streamflow_stations.application.services.station_normalizer import normalize_stations
from streamflow_stations.domain.models.errors import StationSourceError
from streamflow_stations.domain.models.fingerprint import tag_fingerprint, uuid_batch_fingerprint
from streamflow_stations.domain.models.station import StationRecord

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from streamflow_stations.domain.contracts.station_cache import StationCacheProtocol
    from streamflow_stations.domain.ports.station_source import StationSource

BY_TAG_PATH = "bytag"
BY_UUID_PATH = "byuuid"


@dataclass(frozen=True)
class StationQuerySettings:
    """Tuning knobs for station queries."""

    default_tag_limit: int = 30
    overfetch_ratio: float = 1.6
    min_overfetch: int = 80
    max_uuid_batch: int = 15
    allow_partial_uuid_results: bool = False

    def overfetch_limit(self, limit: int) -> int:
        """How many raw records to request so filtering still leaves ``limit`` stations."""
        return max(math.ceil(limit * self.overfetch_ratio), self.min_overfetch)


def _flatten_payloads(payloads: Iterable[Any]) -> list[Any]:
    """Merge per-request payloads into one record list."""
    records: list[Any] = []
    for payload in payloads:
        if isinstance(payload, list):
            records.extend(payload)
        elif isinstance(payload, dict):
            records.append(payload)
    return records


class StationQueryService:
    """Cached, ranked station lookups by tag or by station id.

    The ``fetch_*`` methods never raise: any failure to reach the station
    directory yields an empty list, so callers cannot tell "no stations"
    from "directory unreachable". The ``load_*`` methods do the same work
    without the cache and raise ``StationSourceError`` subclasses instead.
    """

    def __init__(
        self,
        station_source: "StationSource",
        cache: "StationCacheProtocol",
        settings: StationQuerySettings | None = None,
    ) -> None:
        """Initialize with a station source, a cache and optional settings."""
        self._station_source = station_source
        self._cache = cache
        self._settings = settings or StationQuerySettings()

    @property
    def settings(self) -> StationQuerySettings:
        return self._settings

    async def fetch_stations_by_tag(self, tag: str, limit: int | None = None) -> list[StationRecord]:
        """Get the most voted playable stations for a tag.

        Args:
            tag: Category tag, e.g. "jazz".
            limit: Maximum number of stations to return.

        Returns:
            Up to ``limit`` stations, highest votes first; empty on failure.
        """
        if limit is None:
            limit = self._settings.default_tag_limit
        fingerprint = tag_fingerprint(tag, limit)

        cached = self._cache.get(fingerprint)
        if cached is not None:
            logger.debug(f"Cache hit for {fingerprint}")
            return cached

        try:
            stations = await self.load_stations_by_tag(tag, limit)
        except StationSourceError as e:
            logger.warning(f"Could not load stations for tag '{tag}': {e}")
            return []
        except Exception as e:
            logger.error(f"Unexpected error loading stations for tag '{tag}': {e}", exc_info=True)
            return []

        self._cache.put(fingerprint, stations)
        return stations

    async def load_stations_by_tag(self, tag: str, limit: int) -> list[StationRecord]:
        """Fetch, normalize and truncate stations for a tag, bypassing the cache.

        Raises:
            StationSourceError: If the station directory could not be reached.
        """
        params = {
            "limit": self._settings.overfetch_limit(limit),
            "order": "votes",
            "reverse": "true",
            "hidebroken": "true",
        }
        data = await self._station_source.race_fetch(f"{BY_TAG_PATH}/{quote(tag, safe='')}", params)
        stations = normalize_stations(data)[: max(limit, 0)]
        logger.info(f"Loaded {len(stations)} station(s) for tag '{tag}'")
        return stations

    async def fetch_stations_by_uuids(self, uuids: Sequence[str]) -> list[StationRecord]:
        """Resolve station ids (e.g. saved favorites) to ranked station records.

        Args:
            uuids: Station ids in any order; duplicates are ignored.

        Returns:
            Playable stations, highest votes first; empty on failure.
        """
        if not uuids:
            return []
        fingerprint = uuid_batch_fingerprint(uuids)

        cached = self._cache.get(fingerprint)
        if cached is not None:
            logger.debug(f"Cache hit for {fingerprint}")
            return cached

        try:
            stations = await self.load_stations_by_uuids(uuids)
        except StationSourceError as e:
            logger.warning(f"Could not resolve {len(set(uuids))} station id(s): {e}")
            return []
        except Exception as e:
            logger.error(f"Unexpected error resolving station ids: {e}", exc_info=True)
            return []

        self._cache.put(fingerprint, stations)
        return stations

    def _batch(self, uuids: Sequence[str]) -> list[str]:
        """Sorted unique ids, capped at the batch size."""
        unique_ids = sorted(set(uuids))
        batch = unique_ids[: self._settings.max_uuid_batch]
        if len(unique_ids) > len(batch):
            logger.debug(
                f"Ignoring {len(unique_ids) - len(batch)} station id(s) beyond the batch "
                f"limit of {self._settings.max_uuid_batch}"
            )
        return batch

    async def load_stations_by_uuids(self, uuids: Sequence[str]) -> list[StationRecord]:
        """Fetch and normalize stations for a batch of ids, bypassing the cache.

        All lookups run concurrently. Unless partial results are allowed, a
        single failed lookup fails the whole batch.

        Raises:
            StationSourceError: If a lookup failed (or all of them did, when
                partial results are allowed).
        """
        batch = self._batch(uuids)
        if not batch:
            return []

        results = await asyncio.gather(
            *(
                self._station_source.race_fetch(f"{BY_UUID_PATH}/{quote(uuid, safe='')}")
                for uuid in batch
            ),
            return_exceptions=True,
        )

        payloads: list[Any] = []
        failures: list[Exception] = []
        for uuid, result in zip(batch, results, strict=True):
            if isinstance(result, Exception):
                logger.debug(f"Lookup for station {uuid} failed: {result}")
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result
            else:
                payloads.append(result)

        if failures and (not self._settings.allow_partial_uuid_results or not payloads):
            raise failures[0]
        if failures:
            logger.info(f"Resolved {len(payloads)} of {len(batch)} station id(s)")

        return normalize_stations(_flatten_payloads(payloads))
