from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
import uuid

from app.models.base import Base
from app.core.timeutils import utcnow


class Project(Base):
    """Project owned by the external project service; referenced here for access and ingestion"""
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    owner_id = Column(Uuid, nullable=False, index=True)
    api_key = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class ProjectMember(Base):
    __tablename__ = "project_members"

    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, primary_key=True, index=True)
