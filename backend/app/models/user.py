"""User model for dashboard accounts."""
from sqlalchemy import Column, String, DateTime, Uuid
import uuid
from app.constants import UserRole
from app.database import Base
from app.utils.dates import utcnow


class User(Base):
    """Dashboard user model."""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.DEVELOPER.value)  # admin|developer
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True, index=True)
