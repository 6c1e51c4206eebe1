"""Protocol for station list caching."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from streamflow_stations.domain.models.station import StationRecord


class StationCacheProtocol(Protocol):
    """Protocol for caching station lists by query fingerprint."""

    def get(self, fingerprint: str) -> list["StationRecord"] | None:
        """Get the cached stations for a fingerprint.

        Args:
            fingerprint: Cache key derived from the query.

        Returns:
            An independent copy of the cached stations, or None if there is no
            live entry.
        """
        ...

    def put(self, fingerprint: str, stations: list["StationRecord"]) -> None:
        """Cache stations for a fingerprint, replacing any previous entry.

        Args:
            fingerprint: Cache key derived from the query.
            stations: The stations to cache.
        """
        ...
