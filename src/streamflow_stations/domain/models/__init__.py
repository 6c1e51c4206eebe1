"""Domain models for station lookups."""

from streamflow_stations.domain.models.cache_entry import CacheEntry
from streamflow_stations.domain.models.error_details import ErrorDetails
from streamflow_stations.domain.models.errors import (
    AllMirrorsFailed,
    CacheCorrupt,
    MirrorBadResponse,
    MirrorError,
    MirrorTimeout,
    MirrorTransportError,
    NoMirrorsConfigured,
    StationSourceError,
)
from streamflow_stations.domain.models.fingerprint import tag_fingerprint, uuid_batch_fingerprint
from streamflow_stations.domain.models.station import RadioStation, StationRecord

__all__ = [
    "AllMirrorsFailed",
    "CacheCorrupt",
    "CacheEntry",
    "ErrorDetails",
    "MirrorBadResponse",
    "MirrorError",
    "MirrorTimeout",
    "MirrorTransportError",
    "NoMirrorsConfigured",
    "RadioStation",
    "StationRecord",
    "StationSourceError",
    "tag_fingerprint",
    "uuid_batch_fingerprint",
]
