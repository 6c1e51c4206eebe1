"""Composition root wiring config, storage, cache and mirrors into a query service."""

import logging
from typing import TYPE_CHECKING

from streamflow_stations.adapters.cache.station_cache import StationCache
from streamflow_stations.adapters.config.app_config import AppConfig
from streamflow_stations.adapters.radio_browser.mirror_race_fetcher import MirrorRaceFetcher
from streamflow_stations.adapters.storage import InMemoryKeyValueStore, SqliteKeyValueStore
from streamflow_stations.application.services.station_query_service import (
    StationQueryService,
    StationQuerySettings,
)

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientSession

    from streamflow_stations.domain.ports.key_value_store import KeyValueStore


def create_key_value_store(config: AppConfig) -> "KeyValueStore":
    """Persistent SQLite store when a cache path is configured, in-memory otherwise."""
    if config.cache_path:
        logger.info(f"Using persistent station cache at {config.cache_path}")
        return SqliteKeyValueStore(config.cache_path)
    return InMemoryKeyValueStore()


def create_station_query_service(
    config: AppConfig | None = None,
    session: "ClientSession | None" = None,
    store: "KeyValueStore | None" = None,
) -> StationQueryService:
    """Build a ready-to-use StationQueryService.

    Args:
        config: Configuration; loaded from the environment when omitted.
        session: Optional shared aiohttp session for mirror requests.
        store: Optional backing store, overriding the configured one.
    """
    if config is None:
        config = AppConfig().load_config_file()

    cache = StationCache(
        store if store is not None else create_key_value_store(config),
        ttl_seconds=config.cache_ttl_seconds,
        key_prefix=config.cache_key_prefix,
        schema_version=config.cache_schema_version,
    )
    fetcher = MirrorRaceFetcher(
        config.mirrors,
        timeout_seconds=config.mirror_timeout_seconds,
        session=session,
        user_agent=config.user_agent,
    )
    settings = StationQuerySettings(
        default_tag_limit=config.default_tag_limit,
        overfetch_ratio=config.overfetch_ratio,
        min_overfetch=config.min_overfetch,
        max_uuid_batch=config.max_uuid_batch,
        allow_partial_uuid_results=config.allow_partial_uuid_results,
    )
    logger.debug(f"Station client using {len(config.mirrors)} mirror(s)")
    return StationQueryService(fetcher, cache, settings)
