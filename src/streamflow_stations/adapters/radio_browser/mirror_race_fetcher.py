"""Mirror race fetcher for the Radio Browser API.

The same GET request goes to every configured mirror at once; the first mirror
that answers with a 2xx status and a JSON body wins. Each mirror has its own
timeout, so one hanging server never holds up the others.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import aiohttp

from streamflow_stations.adapters.api_request_logger import log_api_request
from streamflow_stations.adapters.radio_browser.constants import (
    DEFAULT_HEADERS,
    DEFAULT_USER_AGENT,
    MIRROR_TIMEOUT_SECONDS,
)
from streamflow_stations.adapters.radio_browser.first_success import first_success
from streamflow_stations.domain.models.errors import (
    MirrorBadResponse,
    MirrorTimeout,
    MirrorTransportError,
    NoMirrorsConfigured,
)
from streamflow_stations.domain.ports.station_source import QueryParams, StationSource

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession


def _format_param_value(value: str | int | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return quote(str(value), safe="")


def build_query_string(query_params: QueryParams) -> str:
    """Render query parameters as ``name=value`` pairs joined with ``&``.

    A string is taken as already encoded. Mapping order is preserved.
    """
    if not query_params:
        return ""
    if isinstance(query_params, str):
        return query_params.lstrip("?")
    return "&".join(f"{k}={_format_param_value(v)}" for k, v in query_params.items())


def build_mirror_url(base_url: str, path: str, query_params: QueryParams = None) -> str:
    """Build ``<base>/<path>?<params>``, leaving out ``?`` when there are no params."""
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    query = build_query_string(query_params)
    return f"{url}?{query}" if query else url


class MirrorRaceFetcher(StationSource):
    """Fetch one resource from whichever mirror answers successfully first."""

    def __init__(
        self,
        mirrors: Sequence[str],
        timeout_seconds: float = MIRROR_TIMEOUT_SECONDS,
        session: ClientSession | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize with mirror base URLs and an optional aiohttp session.

        Args:
            mirrors: Base URLs of equivalent API servers.
            timeout_seconds: Time budget for each individual mirror request.
            session: Shared aiohttp session. Without one, a private session is
                opened for every race.
            user_agent: User-Agent header sent to the mirrors.
        """
        self._mirrors = list(mirrors)
        self._timeout_seconds = timeout_seconds
        self._session = session
        self._headers = {**DEFAULT_HEADERS, "User-Agent": user_agent}

    @property
    def mirrors(self) -> list[str]:
        return list(self._mirrors)

    async def race_fetch(self, path: str, query_params: QueryParams = None) -> Any:
        """Fetch ``path`` from all mirrors and return the first usable JSON payload.

        Args:
            path: Resource path relative to each mirror base URL.
            query_params: Mapping or pre-encoded query string.

        Returns:
            Parsed JSON payload of the winning mirror.

        Raises:
            NoMirrorsConfigured: If the mirror list is empty.
            AllMirrorsFailed: If every mirror failed.
        """
        if not self._mirrors:
            raise NoMirrorsConfigured()

        if self._session is not None:
            return await self._race(self._session, path, query_params)

        async with aiohttp.ClientSession() as session:
            return await self._race(session, path, query_params)

    async def _race(self, session: ClientSession, path: str, query_params: QueryParams) -> Any:
        return await first_success(
            self._fetch_from_mirror(session, mirror, build_mirror_url(mirror, path, query_params))
            for mirror in self._mirrors
        )

    async def _fetch_from_mirror(self, session: ClientSession, mirror: str, url: str) -> Any:
        """Fetch from a single mirror, translating every failure into a MirrorError."""
        log_api_request("GET", url, headers=self._headers)
        try:
            return await asyncio.wait_for(
                self._request_json(session, mirror, url), timeout=self._timeout_seconds
            )
        except TimeoutError as e:
            logger.debug(f"Mirror {mirror} timed out after {self._timeout_seconds}s: {url}")
            raise MirrorTimeout(mirror, f"no answer within {self._timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            logger.debug(f"Mirror {mirror} transport error for {url}: {e}")
            raise MirrorTransportError(mirror, str(e) or e.__class__.__name__) from e
        except MirrorBadResponse as e:
            logger.debug(f"Mirror {mirror} bad response for {url}: {e.details.reason}")
            raise

    async def _request_json(self, session: ClientSession, mirror: str, url: str) -> Any:
        async with session.get(url, headers=self._headers) as response:
            return await self._handle_response(response, mirror)

    @staticmethod
    async def _handle_response(response: ClientResponse, mirror: str) -> Any:
        """Return the JSON body of a successful response."""
        body = await response.read()
        if not 200 <= response.status < 300:
            response_text = body[:200].decode("utf-8", errors="replace")
            raise MirrorBadResponse(
                mirror,
                f"status {response.status}: {response_text}",
                status_code=response.status,
            )

        # aiohttp's response.json() yields None for an empty body
        if not body.strip():
            raise MirrorBadResponse(mirror, "empty body", status_code=response.status)
        try:
            return json.loads(body)
        except ValueError as e:
            raise MirrorBadResponse(
                mirror, f"invalid JSON body: {e}", status_code=response.status
            ) from e
