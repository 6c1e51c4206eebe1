"""Radio Browser API adapter."""

from streamflow_stations.adapters.radio_browser.first_success import first_success
from streamflow_stations.adapters.radio_browser.mirror_race_fetcher import (
    MirrorRaceFetcher,
    build_mirror_url,
    build_query_string,
)

__all__ = ["MirrorRaceFetcher", "build_mirror_url", "build_query_string", "first_success"]
