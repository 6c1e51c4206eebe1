"""Contracts between application services and their collaborators."""

from streamflow_stations.domain.contracts.station_cache import StationCacheProtocol

__all__ = ["StationCacheProtocol"]
