# GET /events/*/stats

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import (
    clamp_window_days,
    get_access_resolver,
    get_aggregator,
    get_current_user_id,
    parse_uuid,
)
from app.core.errors import AnalyticsError, InternalError
from app.schemas.analytics import EventsOverview
from app.services.access import AccessResolver
from app.services.analytics import StatsAggregator
import structlog

logger = structlog.get_logger()
router = APIRouter(prefix="/events", tags=["analytics"])


@router.get("/project/{project_id}/stats", response_model=EventsOverview)
async def get_project_stats(
        project_id: str,
        days: Optional[int] = Query(default=None, description="Window size in days (default 30, max 365)"),
        user_id: UUID = Depends(get_current_user_id),
        access: AccessResolver = Depends(get_access_resolver),
        aggregator: StatsAggregator = Depends(get_aggregator)
):
    """
    Event statistics for one project.

    - **days**: UTC calendar days ending today, inclusive
    """
    project_uuid = parse_uuid(project_id, "project ID")
    await access.require_access(user_id, project_uuid)
    window_days = clamp_window_days(days)

    try:
        return await aggregator.overview({project_uuid}, window_days, datetime.now(timezone.utc))
    except AnalyticsError:
        raise
    except Exception as e:
        logger.error("project_stats_failed", project_id=project_id, error=str(e))
        raise InternalError("Failed to fetch event stats") from e


@router.get("/all/stats", response_model=EventsOverview)
async def get_all_stats(
        days: Optional[int] = Query(default=None, description="Window size in days (default 30, max 365)"),
        user_id: UUID = Depends(get_current_user_id),
        access: AccessResolver = Depends(get_access_resolver),
        aggregator: StatsAggregator = Depends(get_aggregator)
):
    """
    Event statistics across every project the caller owns or is a member of.

    - **days**: UTC calendar days ending today, inclusive
    """
    window_days = clamp_window_days(days)

    try:
        project_ids = await access.visible_projects(user_id)
        return await aggregator.overview(project_ids, window_days, datetime.now(timezone.utc))
    except AnalyticsError:
        raise
    except Exception as e:
        logger.error("all_stats_failed", user_id=str(user_id), error=str(e))
        raise InternalError("Failed to fetch event stats") from e
