"""Filtering, de-duplication and ranking of raw station records."""

import logging
from typing import Any
from urllib.parse import urlsplit

from streamflow_stations.domain.models.station import StationRecord

logger = logging.getLogger(__name__)

# Codec markers a browser audio element can play
PLAYABLE_CODEC_MARKERS = ("mp3", "aac")
PLAYABLE_URL_SUFFIXES = (".mp3", ".aac")
# Codec values that carry no information and are given the benefit of the doubt
UNKNOWN_CODECS = ("", "unknown")


def station_votes(record: StationRecord) -> float:
    """Popularity score of a record; anything non-numeric counts as 0."""
    votes = record.get("votes")
    if isinstance(votes, bool):
        return 0
    if isinstance(votes, int | float):
        return votes
    try:
        return float(votes)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0


def is_secure_stream_url(url: str) -> bool:
    """Check that the stream URL uses the https scheme."""
    try:
        return urlsplit(url.strip()).scheme.lower() == "https"
    except ValueError:
        return False


def is_browser_playable(codec: Any, url: str) -> bool:
    """Check whether a stream is likely playable by a browser audio element.

    Empty or unknown codecs are accepted.
    """
    codec_text = str(codec or "").strip().lower()
    if codec_text in UNKNOWN_CODECS:
        return True
    if any(marker in codec_text for marker in PLAYABLE_CODEC_MARKERS):
        return True
    try:
        path = urlsplit(url.strip()).path.lower()
    except ValueError:
        return False
    return path.endswith(PLAYABLE_URL_SUFFIXES)


def _playable_stream_url(record: Any) -> str | None:
    """Return the record's stream URL if the record can be offered for playback."""
    if not isinstance(record, dict):
        return None
    url = record.get("url_resolved")
    if not isinstance(url, str) or not url.strip():
        return None
    if not is_secure_stream_url(url):
        return None
    if not is_browser_playable(record.get("codec"), url):
        return None
    return url


def normalize_stations(raw_records: Any) -> list[StationRecord]:
    """Turn a raw API payload into a ranked list of unique playable stations.

    Records without an https stream URL or with a codec browsers cannot play
    are dropped. Of several records sharing a display name only the one with
    most votes is kept (the first one on a tie). The result is sorted by votes,
    highest first. Kept records are returned as they came in.

    Args:
        raw_records: Decoded JSON payload; anything but a list yields [].

    Returns:
        Ranked, de-duplicated station records.
    """
    if not isinstance(raw_records, list):
        logger.debug(f"Expected a list of stations, got {type(raw_records).__name__}")
        return []

    unique_stations: dict[str | None, StationRecord] = {}
    for record in raw_records:
        if _playable_stream_url(record) is None:
            continue
        name = record.get("name")
        if not isinstance(name, str):
            name = None
        existing = unique_stations.get(name)
        if existing is None or station_votes(record) > station_votes(existing):
            unique_stations[name] = record

    logger.debug(f"Kept {len(unique_stations)} of {len(raw_records)} station record(s)")
    return sorted(unique_stations.values(), key=station_votes, reverse=True)
