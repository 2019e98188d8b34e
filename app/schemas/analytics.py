from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
import datetime
from typing import List

from app.schemas.event import EventResponse

camel_case = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventStats(BaseModel):
    """Per event name totals within the window"""
    model_config = camel_case

    event_name: str
    total_count: int
    unique_users: int


class DailyEventStats(BaseModel):
    """One UTC calendar day bucket"""
    model_config = camel_case

    date: datetime.date
    total_count: int
    unique_users: int
    per_event_count: dict[str, int] = Field(default_factory=dict)


class EventsOverview(BaseModel):
    """Aggregate read model for a project set and day window"""
    model_config = camel_case

    total_events: int
    unique_users: int
    event_breakdown: List[EventStats]
    recent_events: List[EventResponse]
    daily_stats: List[DailyEventStats]
