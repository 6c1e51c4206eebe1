"""Application services."""

from streamflow_stations.application.services.station_normalizer import normalize_stations
from streamflow_stations.application.services.station_query_service import (
    StationQueryService,
    StationQuerySettings,
)

__all__ = ["StationQueryService", "StationQuerySettings", "normalize_stations"]
