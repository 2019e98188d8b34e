from collections import defaultdict
from datetime import datetime
from typing import Collection, Iterable, List, Optional
from uuid import UUID

import structlog

from app.core.timeutils import to_utc
from app.schemas.analytics import EventsOverview, EventStats
from app.schemas.event import EventResponse
from app.services.bucketing import daily_stats, window_start
from app.services.cache import OverviewCache
from app.services.event_store import EventStore

logger = structlog.get_logger()

# Full project event listing (not window filtered)
LISTING_LIMIT = 100
# recentEvents inside an overview
OVERVIEW_RECENT_LIMIT = 10


def recency_key(event):
    return to_utc(event.created_at), str(event.id)


def event_breakdown(events: Iterable) -> List[EventStats]:
    """Per event name totals, largest first, ties by name"""
    groups = defaultdict(list)
    for event in events:
        groups[event.event_name].append(event.user_id)

    breakdown = [
        EventStats(
            event_name=name,
            total_count=len(user_ids),
            unique_users=len(set(user_ids))
        )
        for name, user_ids in groups.items()
    ]
    breakdown.sort(key=lambda s: (-s.total_count, s.event_name))
    return breakdown


def summarize(events: List, window_days: int, now: datetime) -> EventsOverview:
    """
    Build an overview from events already restricted to the project set.

    Events older than the window start are dropped here too, so callers may
    pass a superset. window_days is trusted; clamping happens at the API
    boundary.
    """
    since = window_start(window_days, now)
    windowed = [e for e in events if to_utc(e.created_at) >= since]

    recent = sorted(windowed, key=recency_key, reverse=True)[:OVERVIEW_RECENT_LIMIT]

    return EventsOverview(
        total_events=len(windowed),
        unique_users=len({e.user_id for e in windowed}),
        event_breakdown=event_breakdown(windowed),
        recent_events=[EventResponse.model_validate(e) for e in recent],
        daily_stats=daily_stats(windowed, window_days, now)
    )


class StatsAggregator:
    """Computes EventsOverview for a project set over a UTC day window"""

    def __init__(self, store: EventStore, cache: Optional[OverviewCache] = None):
        self.store = store
        self.cache = cache

    async def overview(
            self,
            project_ids: Collection[UUID],
            window_days: int,
            now: datetime
    ) -> EventsOverview:
        project_ids = set(project_ids)

        key = None
        if self.cache is not None:
            # Taken before the read so a concurrent ingest cannot be cached over
            key = self.cache.key(project_ids, window_days, now)
            cached = self.cache.get(key)
            if cached is not None:
                logger.info("overview_cache_hit", projects=len(project_ids), window_days=window_days)
                return cached

        since = window_start(window_days, now)
        events = await self.store.fetch_since(project_ids, since)
        result = summarize(events, window_days, now)

        if self.cache is not None:
            self.cache.set(key, result)

        logger.info(
            "overview_computed",
            projects=len(project_ids),
            window_days=window_days,
            total_events=result.total_events
        )
        return result

    async def list_events(self, project_id: UUID) -> List[EventResponse]:
        """Most recent events of one project regardless of window"""
        events = await self.store.latest([project_id], limit=LISTING_LIMIT)
        return [EventResponse.model_validate(e) for e in events]
