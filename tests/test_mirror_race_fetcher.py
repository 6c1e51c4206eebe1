"""Tests for the mirror race fetcher."""

import time
from unittest.mock import patch

import aiohttp
import pytest

from streamflow_stations.adapters.radio_browser import (
    MirrorRaceFetcher,
    build_mirror_url,
    build_query_string,
)
from streamflow_stations.domain.models import (
    AllMirrorsFailed,
    MirrorBadResponse,
    MirrorTimeout,
    MirrorTransportError,
    NoMirrorsConfigured,
)
from tests.fakes import FakeResponse, FakeSession

MIRROR_A = "https://a.example.com/json/stations"
MIRROR_B = "https://b.example.com/json/stations"
MIRROR_C = "https://c.example.com/json/stations"
PAYLOAD = [{"name": "Jazz FM", "votes": 3}]


class TestUrlBuilding:
    """Tests for URL and query string building."""

    def test_when_no_params_then_question_mark_omitted(self) -> None:
        assert build_mirror_url(MIRROR_A, "byuuid/abc") == f"{MIRROR_A}/byuuid/abc"
        assert build_mirror_url(MIRROR_A, "byuuid/abc", "") == f"{MIRROR_A}/byuuid/abc"
        assert build_mirror_url(MIRROR_A, "byuuid/abc", {}) == f"{MIRROR_A}/byuuid/abc"

    def test_when_params_given_then_joined_in_order(self) -> None:
        url = build_mirror_url(
            MIRROR_A + "/", "/bytag/jazz", {"limit": 80, "order": "votes", "reverse": True}
        )

        assert url == f"{MIRROR_A}/bytag/jazz?limit=80&order=votes&reverse=true"

    def test_when_params_are_string_then_used_as_is(self) -> None:
        assert build_query_string("limit=80&hidebroken=true") == "limit=80&hidebroken=true"

    def test_param_values_are_percent_encoded(self) -> None:
        assert build_query_string({"name": "a b&c"}) == "name=a%20b%26c"


class TestRaceFetch:
    """Tests for MirrorRaceFetcher.race_fetch."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("winner_index", [0, 1, 2])
    async def test_when_exactly_one_mirror_succeeds_then_returns_its_payload(
        self, winner_index: int
    ) -> None:
        """Given one good mirror in any position, when racing, then its payload wins."""
        failures = [
            FakeResponse(status=503, text="unavailable"),
            FakeResponse(delay=30),
        ]
        responses = failures[:winner_index] + [FakeResponse(body=PAYLOAD)] + failures[winner_index:]
        mirrors = [MIRROR_A, MIRROR_B, MIRROR_C]
        session = FakeSession(dict(zip(mirrors, responses, strict=True)))
        fetcher = MirrorRaceFetcher(mirrors, timeout_seconds=0.2, session=session)

        start = time.monotonic()
        result = await fetcher.race_fetch("bytag/jazz")
        elapsed = time.monotonic() - start

        assert result == PAYLOAD
        # Never waits for the hanging mirror beyond its timeout
        assert elapsed < 1.0

    @pytest.mark.asyncio
    async def test_when_success_arrives_before_others_then_stragglers_not_awaited(self) -> None:
        session = FakeSession(
            {MIRROR_A: FakeResponse(delay=30), MIRROR_B: FakeResponse(body=PAYLOAD, delay=0.01)}
        )
        fetcher = MirrorRaceFetcher([MIRROR_A, MIRROR_B], timeout_seconds=5, session=session)

        start = time.monotonic()
        result = await fetcher.race_fetch("bytag/jazz")

        assert result == PAYLOAD
        assert time.monotonic() - start < 1.0

    @pytest.mark.asyncio
    async def test_when_one_mirror_times_out_then_sibling_still_answers(self) -> None:
        """Given a mirror that times out first, when racing, then a slower sibling can still win."""
        session = FakeSession(
            {MIRROR_A: FakeResponse(delay=30), MIRROR_B: FakeResponse(body=PAYLOAD, delay=0.15)}
        )
        fetcher = MirrorRaceFetcher([MIRROR_A, MIRROR_B], timeout_seconds=0.3, session=session)

        assert await fetcher.race_fetch("bytag/jazz") == PAYLOAD

    @pytest.mark.asyncio
    async def test_when_all_mirrors_fail_then_raises_all_mirrors_failed(self) -> None:
        """Given every kind of mirror failure, when racing, then AllMirrorsFailed carries them."""
        session = FakeSession(
            {
                MIRROR_A: FakeResponse(status=500, text="boom"),
                MIRROR_B: FakeResponse(delay=30),
                MIRROR_C: FakeResponse(error=aiohttp.ClientConnectionError("refused")),
            }
        )
        fetcher = MirrorRaceFetcher(
            [MIRROR_A, MIRROR_B, MIRROR_C], timeout_seconds=0.1, session=session
        )

        with pytest.raises(AllMirrorsFailed) as exc_info:
            await fetcher.race_fetch("bytag/jazz")

        errors = {e.mirror: e for e in exc_info.value.errors}
        assert isinstance(errors[MIRROR_A], MirrorBadResponse)
        assert errors[MIRROR_A].status_code == 500
        assert isinstance(errors[MIRROR_B], MirrorTimeout)
        assert isinstance(errors[MIRROR_C], MirrorTransportError)
        assert {d.mirror for d in exc_info.value.details} == {MIRROR_A, MIRROR_B, MIRROR_C}

    @pytest.mark.asyncio
    async def test_when_no_mirrors_then_raises_without_requests(self) -> None:
        session = FakeSession({})
        fetcher = MirrorRaceFetcher([], session=session)

        with pytest.raises(NoMirrorsConfigured):
            await fetcher.race_fetch("bytag/jazz")

        assert session.requests == []

    @pytest.mark.asyncio
    async def test_when_body_not_json_then_mirror_counts_as_failed(self) -> None:
        session = FakeSession(
            {
                MIRROR_A: FakeResponse(status=200, text="<html>maintenance</html>"),
                MIRROR_B: FakeResponse(body=PAYLOAD, delay=0.05),
            }
        )
        fetcher = MirrorRaceFetcher([MIRROR_A, MIRROR_B], session=session)

        assert await fetcher.race_fetch("bytag/jazz") == PAYLOAD

    @pytest.mark.asyncio
    async def test_when_only_mirror_returns_invalid_json_then_bad_response(self) -> None:
        session = FakeSession({MIRROR_A: FakeResponse(status=200, text="not json")})
        fetcher = MirrorRaceFetcher([MIRROR_A], session=session)

        with pytest.raises(AllMirrorsFailed) as exc_info:
            await fetcher.race_fetch("bytag/jazz")

        assert isinstance(exc_info.value.errors[0], MirrorBadResponse)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("empty_body", ["", "  \n"])
    async def test_when_body_empty_then_healthy_mirror_wins(self, empty_body: str) -> None:
        """Given a fast mirror answering 200 with no body, when racing,
        then the slower mirror with real data wins."""
        session = FakeSession(
            {
                MIRROR_A: FakeResponse(status=200, text=empty_body),
                MIRROR_B: FakeResponse(body=PAYLOAD, delay=0.05),
            }
        )
        fetcher = MirrorRaceFetcher([MIRROR_A, MIRROR_B], session=session)

        assert await fetcher.race_fetch("bytag/jazz") == PAYLOAD

    @pytest.mark.asyncio
    async def test_when_only_mirror_returns_empty_body_then_bad_response(self) -> None:
        session = FakeSession({MIRROR_A: FakeResponse(status=200, text="")})
        fetcher = MirrorRaceFetcher([MIRROR_A], session=session)

        with pytest.raises(AllMirrorsFailed) as exc_info:
            await fetcher.race_fetch("bytag/jazz")

        error = exc_info.value.errors[0]
        assert isinstance(error, MirrorBadResponse)
        assert error.status_code == 200
        assert "empty body" in error.details.reason

    @pytest.mark.asyncio
    async def test_when_error_body_not_decodable_then_bad_response_with_status(self) -> None:
        """Given a 502 whose body is not valid UTF-8, when racing,
        then the mirror still fails with MirrorBadResponse."""
        session = FakeSession(
            {MIRROR_A: FakeResponse(status=502, raw=b"\xff\xfe bad gateway \x80")}
        )
        fetcher = MirrorRaceFetcher([MIRROR_A], session=session)

        with pytest.raises(AllMirrorsFailed) as exc_info:
            await fetcher.race_fetch("bytag/jazz")

        error = exc_info.value.errors[0]
        assert isinstance(error, MirrorBadResponse)
        assert error.status_code == 502
        assert "bad gateway" in error.details.reason
        assert [d.status_code for d in exc_info.value.details] == [502]

    @pytest.mark.asyncio
    async def test_when_success_body_not_decodable_then_bad_response(self) -> None:
        session = FakeSession({MIRROR_A: FakeResponse(status=200, raw=b"\x80\x81[]")})
        fetcher = MirrorRaceFetcher([MIRROR_A], session=session)

        with pytest.raises(AllMirrorsFailed) as exc_info:
            await fetcher.race_fetch("bytag/jazz")

        assert isinstance(exc_info.value.errors[0], MirrorBadResponse)

    @pytest.mark.asyncio
    async def test_requests_every_mirror_with_json_accept_header(self) -> None:
        session = FakeSession(
            {MIRROR_A: FakeResponse(body=PAYLOAD), MIRROR_B: FakeResponse(body=PAYLOAD)}
        )
        fetcher = MirrorRaceFetcher([MIRROR_A, MIRROR_B], session=session, user_agent="test/1")

        await fetcher.race_fetch("bytag/jazz", {"limit": 80, "hidebroken": "true"})

        assert sorted(session.requested_urls) == [
            f"{MIRROR_A}/bytag/jazz?limit=80&hidebroken=true",
            f"{MIRROR_B}/bytag/jazz?limit=80&hidebroken=true",
        ]
        for _, headers in session.requests:
            assert headers["Accept"] == "application/json"
            assert headers["User-Agent"] == "test/1"

    @pytest.mark.asyncio
    async def test_when_no_session_given_then_private_session_is_opened_and_closed(self) -> None:
        session = FakeSession({MIRROR_A: FakeResponse(body=PAYLOAD)})
        fetcher = MirrorRaceFetcher([MIRROR_A])

        with patch(
            "streamflow_stations.adapters.radio_browser.mirror_race_fetcher.aiohttp.ClientSession",
            return_value=session,
        ):
            result = await fetcher.race_fetch("byuuid/abc")

        assert result == PAYLOAD
        assert session.closed is True

    @pytest.mark.asyncio
    async def test_requests_are_logged_when_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STREAMFLOW_LOG_REQUESTS", "true")
        session = FakeSession({MIRROR_A: FakeResponse(body=PAYLOAD)})
        fetcher = MirrorRaceFetcher([MIRROR_A], session=session)

        with patch(
            "streamflow_stations.adapters.api_request_logger.logger"
        ) as mock_logger:
            await fetcher.race_fetch("byuuid/abc")

        logged = mock_logger.info.call_args[0][0]
        assert f"GET {MIRROR_A}/byuuid/abc" in logged
