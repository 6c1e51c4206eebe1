"""Station aggregation and resolution client for internet radio."""

from streamflow_stations.application.services import StationQueryService, StationQuerySettings
from streamflow_stations.station_client import create_station_query_service

__all__ = ["StationQueryService", "StationQuerySettings", "create_station_query_service"]
