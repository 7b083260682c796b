"""Device model: one client installation within a project."""
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
import uuid
from app.database import Base
from app.utils.dates import utcnow


class Device(Base):
    """Unique player device, keyed by the SDK-generated identifier per project."""
    __tablename__ = "devices"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    device_id = Column(String, nullable=False)  # From SDK, unique only within a project
    platform = Column(String, nullable=False)  # iOS, Android, Windows, ...
    os_version = Column(String, nullable=False)
    app_version = Column(String, nullable=False)
    first_seen = Column(DateTime, nullable=False)
    last_seen = Column(DateTime, nullable=False, index=True)
    ip_address = Column(String, nullable=False, default="")
    country = Column(String, nullable=False, default="")  # Geolocation is not resolved
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True, index=True)

    # Relationships
    project = relationship("Project")

    __table_args__ = (
        UniqueConstraint("project_id", "device_id", name="uq_devices_project_device"),
    )
