# Pydantic schemas

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from uuid import UUID

from app.core.timeutils import to_utc

PropertyValue = bool | int | float | str


class EventTrack(BaseModel):
    """Schema for tracking a single event from a client SDK"""

    # Emptiness is checked by the ingestion service so it surfaces as a 400
    event_name: str = Field(..., max_length=255)
    user_id: str = Field(..., max_length=255)
    properties: dict[str, PropertyValue] | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator('event_name', 'user_id', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        # Length limits apply to the trimmed value
        if isinstance(v, str):
            return v.strip()
        return v


class EventResponse(BaseModel):
    """Response schema for a stored event"""

    id: UUID
    event_name: str
    user_id: str
    project_id: UUID
    properties: dict[str, PropertyValue] | None = None
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @field_validator('created_at')
    @classmethod
    def validate_utc(cls, v: datetime) -> datetime:
        return to_utc(v)
