"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from streamflow_stations.adapters.cache.station_cache import (
    CACHE_KEY_PREFIX,
    CACHE_SCHEMA_VERSION,
)
from streamflow_stations.adapters.radio_browser.constants import (
    DEFAULT_USER_AGENT,
    MIRROR_TIMEOUT_SECONDS,
    RADIO_BROWSER_MIRRORS,
)


def _normalize_mirror_url(url: str) -> str:
    url = url.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"mirror URL must start with http:// or https://: {url!r}")
    return url


class AppConfig(BaseSettings):
    """Station client configuration following 12-factor principles.

    Every field can be set through a ``STREAMFLOW_``-prefixed environment
    variable (list values as JSON), a ``.env`` file, or an optional TOML file.
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # Mirror configuration
    mirrors: list[str] = Field(
        default_factory=lambda: list(RADIO_BROWSER_MIRRORS),
        description="Base URLs of equivalent Radio Browser API servers",
    )
    mirror_timeout_seconds: float = Field(
        default=MIRROR_TIMEOUT_SECONDS, description="Time budget for each mirror request"
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent sent to mirrors")

    # Cache configuration
    cache_ttl_minutes: float = Field(default=30, description="Maximum age of a cache entry")
    cache_key_prefix: str = Field(default=CACHE_KEY_PREFIX, description="Cache key namespace")
    cache_schema_version: str = Field(
        default=CACHE_SCHEMA_VERSION,
        description="Cache entry format version; changing it invalidates old entries",
    )
    cache_path: str | None = Field(
        default=None,
        description="SQLite file for a persistent cache (in-memory cache if not set)",
    )

    # Query configuration
    default_tag_limit: int = Field(default=30, description="Stations returned per tag by default")
    overfetch_ratio: float = Field(
        default=1.6, description="Raw records requested per wanted station for tag queries"
    )
    min_overfetch: int = Field(default=80, description="Minimum raw records requested per tag")
    max_uuid_batch: int = Field(default=15, description="Maximum station ids resolved per batch")
    allow_partial_uuid_results: bool = Field(
        default=False,
        description="Return the stations that resolved when some id lookups fail",
    )

    # Optional TOML config file
    config_file: str | None = Field(
        default=None, description="Path to TOML file with [mirrors], [cache] and [query] tables"
    )

    @field_validator("mirrors")
    @classmethod
    def validate_mirrors(cls, v: list[str]) -> list[str]:
        """Strip trailing slashes and require an http(s) scheme."""
        return [_normalize_mirror_url(url) for url in v]

    @field_validator("mirror_timeout_seconds", "cache_ttl_minutes", "overfetch_ratio")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate durations and ratios are positive."""
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("default_tag_limit", "min_overfetch", "max_uuid_batch")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate counts are not negative."""
        if v < 0:
            raise ValueError("value must not be negative")
        return v

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_minutes * 60

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file, updating settings from its tables.

        Assigned values go through the same field validators as env values.
        """
        if not self.config_file:
            raise ValueError("config_file must be set to load a configuration file")

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        mirrors = toml_data.get("mirrors", {})
        if "base_urls" in mirrors:
            if not isinstance(mirrors["base_urls"], list):
                raise ValueError("TOML config 'mirrors.base_urls' must be a list")
            self.mirrors = [_normalize_mirror_url(str(url)) for url in mirrors["base_urls"]]
        if "timeout_seconds" in mirrors:
            self.mirror_timeout_seconds = float(mirrors["timeout_seconds"])

        cache = toml_data.get("cache", {})
        for key in ("ttl_minutes", "key_prefix", "schema_version", "path"):
            if key in cache:
                setattr(self, f"cache_{key}", cache[key])

        query = toml_data.get("query", {})
        for key in (
            "default_tag_limit",
            "overfetch_ratio",
            "min_overfetch",
            "max_uuid_batch",
            "allow_partial_uuid_results",
        ):
            if key in query:
                setattr(self, key, query[key])

        return toml_data

    def load_config_file(self) -> "AppConfig":
        """Apply the TOML file named by ``config_file``, if any.

        Returns:
            This config, for chaining.
        """
        if self.config_file:
            self._load_toml_data()
        return self
