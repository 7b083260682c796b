"""Project model: the tenant boundary for telemetry."""
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid
from app.database import Base
from app.utils.dates import utcnow
from app.utils.hashing import generate_api_key


class Project(Base):
    """Game project tracked by Kogase."""
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    api_key = Column(String, nullable=False, unique=True, index=True, default=generate_api_key)
    owner_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True, index=True)

    # Relationships
    owner = relationship("User")
    members = relationship("ProjectUser", back_populates="project", cascade="all, delete-orphan")
