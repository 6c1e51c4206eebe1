"""Error details domain model."""

from pydantic import BaseModel, ConfigDict


class ErrorDetails(BaseModel):
    """Details about a failed mirror request, including HTTP status code if applicable."""

    model_config = ConfigDict(frozen=True)

    mirror: str
    status_code: int | None = None
    reason: str
