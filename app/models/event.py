# SQLAlchemy models

from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Index, Uuid
import uuid

from app.core.timeutils import utcnow
from app.models.base import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_name = Column(String(255), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    properties = Column(JSON, nullable=True)
    # Server-assigned at ingestion; clients never set it
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        # Window queries filter by project set and a created_at lower bound
        Index('idx_project_created', 'project_id', 'created_at'),
    )
