from typing import Set
from uuid import UUID

from sqlalchemy import select, union
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.core.errors import Forbidden, NotFound
from app.models.project import Project, ProjectMember

logger = structlog.get_logger()


class AccessResolver:
    """Resolves which projects a user may view: owned ∪ member"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def visible_projects(self, user_id: UUID) -> Set[UUID]:
        owned = select(Project.id.label("project_id")).where(Project.owner_id == user_id)
        member = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)

        result = await self.db.execute(union(owned, member))
        return {row[0] for row in result.fetchall()}

    async def has_access(self, user_id: UUID, project_id: UUID) -> bool:
        return project_id in await self.visible_projects(user_id)

    async def require_access(self, user_id: UUID, project_id: UUID) -> Project:
        """
        Load a project the user may view.

        Existence is checked before access, so an unknown project is a 404
        for everyone and only an existing one can yield a 403.
        """
        project = await self.db.get(Project, project_id)
        if project is None:
            raise NotFound("Project not found")

        if not await self.has_access(user_id, project_id):
            logger.warning("access_denied", user_id=str(user_id), project_id=str(project_id))
            raise Forbidden("You don't have access to this project")

        return project
