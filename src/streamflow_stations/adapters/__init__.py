"""Adapters layer - external system integrations."""

from streamflow_stations.adapters.cache import StationCache
from streamflow_stations.adapters.config import AppConfig
from streamflow_stations.adapters.radio_browser import MirrorRaceFetcher
from streamflow_stations.adapters.storage import InMemoryKeyValueStore, SqliteKeyValueStore

__all__ = [
    "AppConfig",
    "InMemoryKeyValueStore",
    "MirrorRaceFetcher",
    "SqliteKeyValueStore",
    "StationCache",
]
