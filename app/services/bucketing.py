"""
UTC calendar-day windows and per-day buckets.

Every date here is a UTC calendar date. Event timestamps are normalized with
``to_utc`` before truncation, so the process timezone never affects which
bucket an event lands in.
"""

from collections import Counter, defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List

from app.core.errors import InternalError
from app.core.timeutils import to_utc
from app.schemas.analytics import DailyEventStats


def today_utc(now: datetime) -> date:
    return to_utc(now).date()


def window_dates(window_days: int, now: datetime) -> List[date]:
    """Dates of the inclusive window ending today (UTC), oldest first"""
    if window_days < 1:
        raise InternalError("Failed to calculate date range")

    today = today_utc(now)
    try:
        start = today - timedelta(days=window_days - 1)
        dates = [start + timedelta(days=offset) for offset in range(window_days)]
    except OverflowError as e:
        raise InternalError("Failed to calculate date range") from e

    if len(dates) != window_days or dates[-1] != today:
        raise InternalError("Failed to calculate date range")
    return dates


def window_start(window_days: int, now: datetime) -> datetime:
    """UTC start-of-day of the window's first date"""
    first = window_dates(window_days, now)[0]
    return datetime.combine(first, time.min, tzinfo=timezone.utc)


def daily_stats(events: Iterable, window_days: int, now: datetime) -> List[DailyEventStats]:
    """
    Bucket events into one entry per UTC day of the window.

    Days without events are still emitted with zero counts. Events outside
    the window are ignored.

    Args:
        events: objects with event_name, user_id and created_at attributes
        window_days: number of days, already validated by the caller
        now: reference time whose UTC date is the window's last day

    Returns:
        Exactly window_days entries, oldest first
    """
    dates = window_dates(window_days, now)

    events_by_date: Dict[date, list] = defaultdict(list)
    for event in events:
        events_by_date[to_utc(event.created_at).date()].append(event)

    stats = []
    for day in dates:
        day_events = events_by_date.get(day, [])
        stats.append(
            DailyEventStats(
                date=day,
                total_count=len(day_events),
                unique_users=len({e.user_id for e in day_events}),
                per_event_count=dict(Counter(e.event_name for e in day_events))
            )
        )

    return stats
