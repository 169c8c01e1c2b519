"""Pydantic schemas for the downtime window API endpoints."""

from typing import Any

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
)

from src.domain.entities.downtime_window import AffectedClusterMatcher, DowntimeWindow

# Omitted from responses when unset
OPTIONAL_FIELDS = ("end_time", "description", "external_id", "external_link")


class DowntimeWindowApiModel(BaseModel):
    """Downtime window as exchanged over the API.

    On requests, every field may be omitted: a missing ID is assigned by the
    server on create, and a PATCH only applies the fields that are present
    and non-empty.
    """

    id: str = Field(default="", description="Window identifier (UUID)")
    start_time: AwareDatetime | None = Field(
        None, description="Start of the window (RFC 3339 with offset)"
    )
    end_time: AwareDatetime | None = Field(
        None, description="End of the window; omit for an open-ended window"
    )
    title: str = Field(default="", description="Short human-readable title")
    description: str = Field(default="", description="Free text description")
    external_id: str = Field(
        default="",
        description="External reference (e.g. change ticket); creates with a known "
        "external_id update the existing window",
    )
    external_link: str = Field(default="", description="Link to the external reference")
    affects: list[dict[str, str]] = Field(
        default_factory=list,
        description="Fact matchers; a cluster is affected if all facts of any matcher "
        "match. An empty matcher matches every cluster.",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "4c1f8f5e-5f0c-4f63-a0ad-2f1a3f6c9d10",
                "start_time": "2024-03-01T22:00:00Z",
                "end_time": "2024-03-02T02:00:00Z",
                "title": "OpenShift 4.14 upgrade",
                "external_id": "CHG-1234",
                "external_link": "https://tickets.example.com/CHG-1234",
                "affects": [{"cloud": "cloudscale", "region": "rma"}, {"cloud": "exoscale"}],
            }
        }
    )

    @model_serializer(mode="wrap")
    def _omit_unset(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for key in OPTIONAL_FIELDS:
            if data.get(key) in (None, ""):
                data.pop(key, None)
        return data

    def to_entity(self, window_id: str | None = None) -> DowntimeWindow:
        """Convert to a domain entity.

        Args:
            window_id: ID taken from the request path; overrides the body ID

        Returns:
            DowntimeWindow entity
        """
        return DowntimeWindow(
            id=window_id if window_id is not None else self.id,
            start_time=self.start_time,
            end_time=self.end_time,
            title=self.title,
            description=self.description,
            external_id=self.external_id,
            external_link=self.external_link,
            affects=[AffectedClusterMatcher(matcher) for matcher in self.affects],
        )

    @classmethod
    def from_entity(cls, window: DowntimeWindow) -> "DowntimeWindowApiModel":
        """Build the API representation of a domain entity."""
        return cls(
            id=window.id,
            start_time=window.start_time,
            end_time=window.end_time,
            title=window.title,
            description=window.description,
            external_id=window.external_id,
            external_link=window.external_link,
            affects=[matcher.to_dict() for matcher in window.affects],
        )
