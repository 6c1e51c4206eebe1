"""Station domain models.

Raw station records are plain JSON objects as returned by the Radio Browser
mirrors. They are passed around untouched so that fields this package does not
interpret (favicon, bitrate, tags, country, ...) survive filtering and caching.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

StationRecord = dict[str, Any]


class RadioStation(BaseModel):
    """Typed read-only view over a raw station record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    stationuuid: str = ""
    changeuuid: str = ""
    name: str = ""
    url: str = ""
    url_resolved: str = ""
    homepage: str = ""
    favicon: str = ""
    tags: str = ""
    country: str = ""
    state: str = ""
    language: str = ""
    votes: int = 0
    codec: str = ""
    bitrate: int = 0

    @classmethod
    def from_record(cls, record: StationRecord) -> "RadioStation":
        """Build a view from a raw record, ignoring null fields."""
        return cls.model_validate({k: v for k, v in record.items() if v is not None})

    @property
    def tag_list(self) -> list[str]:
        """Tags as a list (the API sends them comma-separated)."""
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]
