from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_access_resolver,
    get_aggregator,
    get_current_user_id,
    get_ingest_project,
    get_overview_cache,
    parse_uuid,
)
from app.core.database import get_db
from app.core.errors import AnalyticsError, InternalError
from app.models.project import Project
from app.schemas.event import EventTrack, EventResponse
from app.services.access import AccessResolver
from app.services.analytics import StatsAggregator
from app.services.cache import OverviewCache
from app.services.ingestion import IngestionService
import structlog

logger = structlog.get_logger()
router = APIRouter(prefix="/events", tags=["events"])


@router.post("/track", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def track_event(
        payload: EventTrack,
        project: Project = Depends(get_ingest_project),
        db: AsyncSession = Depends(get_db),
        overview_cache: Optional[OverviewCache] = Depends(get_overview_cache)
):
    """
    Record one event for the project owning the API key.

    - **X-API-Key**: project ingestion key (header)
    - **eventName** / **userId**: must be non-empty after trimming
    - **properties**: optional flat map of primitive values

    The event timestamp is always assigned by the server.
    """
    try:
        service = IngestionService(db, cache=overview_cache)
        event = await service.record_for(
            project,
            payload.event_name,
            payload.user_id,
            payload.properties
        )
        return EventResponse.model_validate(event)

    except AnalyticsError:
        raise
    except Exception as e:
        logger.error("ingestion_failed", error=str(e))
        raise InternalError("Failed to record event") from e


@router.get("/project/{project_id}", response_model=List[EventResponse])
async def list_project_events(
        project_id: str,
        user_id: UUID = Depends(get_current_user_id),
        access: AccessResolver = Depends(get_access_resolver),
        aggregator: StatsAggregator = Depends(get_aggregator)
):
    """Most recent events of a project (up to 100), newest first."""
    project_uuid = parse_uuid(project_id, "project ID")
    await access.require_access(user_id, project_uuid)

    try:
        return await aggregator.list_events(project_uuid)
    except AnalyticsError:
        raise
    except Exception as e:
        logger.error("event_listing_failed", project_id=project_id, error=str(e))
        raise InternalError("Failed to fetch events") from e
