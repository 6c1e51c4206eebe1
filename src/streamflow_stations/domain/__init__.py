"""Domain layer - core models, ports and contracts."""

from streamflow_stations.domain.contracts import StationCacheProtocol
from streamflow_stations.domain.models import (
    AllMirrorsFailed,
    NoMirrorsConfigured,
    RadioStation,
    StationRecord,
    StationSourceError,
)
from streamflow_stations.domain.ports import KeyValueStore, StationSource

__all__ = [
    "AllMirrorsFailed",
    "KeyValueStore",
    "NoMirrorsConfigured",
    "RadioStation",
    "StationCacheProtocol",
    "StationRecord",
    "StationSource",
    "StationSourceError",
]
