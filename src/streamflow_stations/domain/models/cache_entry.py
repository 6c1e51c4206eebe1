"""Cache entry domain model."""

from pydantic import BaseModel, ConfigDict

from streamflow_stations.domain.models.station import StationRecord


class CacheEntry(BaseModel):
    """Cached station list with the epoch-millis time it was stored."""

    model_config = ConfigDict(frozen=True)

    data: list[StationRecord]
    timestamp: int

    def age_millis(self, now_millis: int) -> int:
        return now_millis - self.timestamp
