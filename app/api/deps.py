from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.errors import BadRequest, Unauthorized
from app.models.project import Project
from app.services import cache
from app.services.access import AccessResolver
from app.services.analytics import StatsAggregator
from app.services.event_store import EventStore
from app.services.ingestion import IngestionService


def parse_uuid(value: str, name: str) -> UUID:
    try:
        return UUID(value)
    except (ValueError, AttributeError, TypeError) as e:
        raise BadRequest(f"Invalid {name}") from e


def get_current_user_id(
        x_user_id: Optional[str] = Header(default=None, description="Authenticated user id set by the gateway")
) -> UUID:
    """Caller identity; authentication itself happens upstream"""
    if not x_user_id:
        raise Unauthorized("Authentication required")
    return parse_uuid(x_user_id, "user ID")


def clamp_window_days(days: Optional[int]) -> int:
    """Window size policy: default when absent, clamped to [1, max]"""
    if days is None:
        return settings.default_window_days
    return min(max(days, 1), settings.max_window_days)


async def get_ingest_project(
        x_api_key: Optional[str] = Header(default=None, description="Project ingestion key"),
        db: AsyncSession = Depends(get_db)
) -> Project:
    """Project owning the API key, resolved before the request body is read"""
    return await IngestionService(db).resolve_project(x_api_key)


def get_overview_cache() -> Optional[cache.OverviewCache]:
    return cache.overview_cache


def get_access_resolver(db: AsyncSession = Depends(get_db)) -> AccessResolver:
    return AccessResolver(db)


def get_aggregator(
        db: AsyncSession = Depends(get_db),
        overview_cache: Optional[cache.OverviewCache] = Depends(get_overview_cache)
) -> StatsAggregator:
    return StatsAggregator(EventStore(db), cache=overview_cache)
