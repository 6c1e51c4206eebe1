"""Ports (interfaces) for the ports-and-adapters architecture."""

from streamflow_stations.domain.ports.key_value_store import KeyValueStore
from streamflow_stations.domain.ports.station_source import QueryParams, StationSource

__all__ = [
    "KeyValueStore",
    "QueryParams",
    "StationSource",
]
