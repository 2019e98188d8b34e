from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.core.errors import BadRequest, Unauthorized
from app.core.timeutils import utcnow
from app.models.event import Event
from app.models.project import Project
from app.services.cache import OverviewCache
from app.services.event_store import EventStore

logger = structlog.get_logger()


class IngestionService:
    """Service for recording single events submitted with a project API key"""

    def __init__(self, db: AsyncSession, cache: Optional[OverviewCache] = None):
        self.db = db
        self.store = EventStore(db)
        self.cache = cache

    async def resolve_project(self, api_key: Optional[str]) -> Project:
        if not api_key or not api_key.strip():
            raise Unauthorized("API key required")

        result = await self.db.execute(select(Project).where(Project.api_key == api_key))
        project = result.scalar_one_or_none()
        if project is None:
            logger.warning("ingestion_invalid_api_key")
            raise Unauthorized("Invalid API key")

        return project

    async def record(
            self,
            api_key: Optional[str],
            event_name: str,
            user_id: str,
            properties: Optional[dict[str, Any]] = None
    ) -> Event:
        """
        Validate and append one event.

        Returns:
            The stored Event, created_at set to the server's UTC time
        """
        project = await self.resolve_project(api_key)
        return await self.record_for(project, event_name, user_id, properties)

    async def record_for(
            self,
            project: Project,
            event_name: str,
            user_id: str,
            properties: Optional[dict[str, Any]] = None
    ) -> Event:
        """Append one event for a project whose API key is already resolved"""
        event_name = (event_name or "").strip()
        if not event_name:
            raise BadRequest("Event name cannot be empty")

        user_id = (user_id or "").strip()
        if not user_id:
            raise BadRequest("User ID cannot be empty")

        event = Event(
            event_name=event_name,
            user_id=user_id,
            project_id=project.id,
            properties=properties,
            created_at=utcnow()
        )
        await self.store.append(event)

        if self.cache is not None:
            self.cache.invalidate(project.id)

        logger.info(
            "event_recorded",
            project_id=str(project.id),
            event_name=event_name
        )
        return event
