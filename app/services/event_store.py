from datetime import datetime
from typing import Collection, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.timeutils import to_utc
from app.models.event import Event


class EventStore:
    """Append-only access to raw events, looked up by project set and time"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(self, event: Event) -> Event:
        """Insert one event in its own transaction; nothing is kept on failure"""
        try:
            self.db.add(event)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return event

    async def fetch_since(
            self,
            project_ids: Collection[UUID],
            since: datetime
    ) -> List[Event]:
        """All events for the projects with created_at >= since"""
        if not project_ids:
            return []

        stmt = (
            select(Event)
            .where(Event.project_id.in_(list(project_ids)))
            .where(Event.created_at >= to_utc(since))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def latest(
            self,
            project_ids: Collection[UUID],
            limit: int,
            since: Optional[datetime] = None
    ) -> List[Event]:
        """Most recent events first, optionally bounded below by since"""
        if not project_ids:
            return []

        stmt = select(Event).where(Event.project_id.in_(list(project_ids)))
        if since is not None:
            stmt = stmt.where(Event.created_at >= to_utc(since))
        stmt = stmt.order_by(Event.created_at.desc(), Event.id.desc()).limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
