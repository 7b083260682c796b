"""Telemetry event model."""
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
import uuid
from app.database import Base
from app.utils.dates import utcnow


class Event(Base):
    """Append-only telemetry fact recorded from the SDK."""
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    device_id = Column(Uuid, ForeignKey("devices.id"), nullable=False, index=True)
    event_type = Column(String(20), nullable=False, index=True)  # session_start, install, custom, ...
    event_name = Column(String, nullable=False)
    parameters = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict)
    timestamp = Column(DateTime, nullable=False)  # Client-reported
    received_at = Column(DateTime, nullable=False)  # Server clock at persistence
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True, index=True)

    # Relationships
    device = relationship("Device")

    # Composite index for the newest-first analytics listing
    __table_args__ = (
        Index("idx_events_project_received", "project_id", "received_at"),
    )
