"""Failure taxonomy for station lookups.

Mirror-level errors stay inside the mirror race; only ``AllMirrorsFailed`` and
``NoMirrorsConfigured`` travel up to the query service, which turns them into
an empty result.
"""

from collections.abc import Sequence

from streamflow_stations.domain.models.error_details import ErrorDetails


class StationSourceError(Exception):
    """Base class for every error raised while resolving stations."""


class MirrorError(StationSourceError):
    """A single mirror failed to answer one request."""

    def __init__(self, mirror: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"{mirror}: {reason}")
        self.details = ErrorDetails(mirror=mirror, status_code=status_code, reason=reason)

    @property
    def mirror(self) -> str:
        return self.details.mirror


class MirrorTimeout(MirrorError):
    """The mirror did not answer within its time budget."""


class MirrorTransportError(MirrorError):
    """Network, DNS or TLS failure while talking to the mirror."""


class MirrorBadResponse(MirrorError):
    """The mirror answered with a non-success status or an unparsable body."""

    @property
    def status_code(self) -> int | None:
        return self.details.status_code


class AllMirrorsFailed(StationSourceError):
    """Every mirror failed for one logical request."""

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors = list(errors)
        summary = "; ".join(str(e) for e in self.errors) or "no mirror answered"
        super().__init__(f"All {len(self.errors)} mirror(s) failed: {summary}")

    @property
    def details(self) -> list[ErrorDetails]:
        """Per-mirror error details, for errors that carry them."""
        return [e.details for e in self.errors if isinstance(e, MirrorError)]


class NoMirrorsConfigured(StationSourceError):
    """The mirror list is empty."""

    def __init__(self) -> None:
        super().__init__("No station mirrors configured")


class CacheCorrupt(StationSourceError):
    """A stored cache entry could not be deserialized."""
