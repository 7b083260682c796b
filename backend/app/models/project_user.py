"""Project membership for users who do not own the project."""
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.constants import ProjectRole
from app.database import Base
from app.utils.dates import utcnow


class ProjectUser(Base):
    """Grants a non-owner access to a project. One row per (project, user)."""
    __tablename__ = "project_users"

    project_id = Column(Uuid, ForeignKey("projects.id"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id"), primary_key=True, index=True)
    role = Column(String(20), nullable=False, default=ProjectRole.CONTRIBUTOR.value)  # contributor|admin
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="members")
    user = relationship("User")
