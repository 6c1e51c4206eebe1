"""Station source port."""

from collections.abc import Mapping
from typing import Any, Protocol

QueryParams = Mapping[str, str | int | bool] | str | None


class StationSource(Protocol):
    """Port for fetching raw station directory payloads."""

    async def race_fetch(self, path: str, query_params: QueryParams = None) -> Any:
        """Fetch a resource path and return the parsed JSON payload.

        Raises:
            AllMirrorsFailed: If no endpoint produced a usable response.
            NoMirrorsConfigured: If there is nothing to ask.
        """
        ...
