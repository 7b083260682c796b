"""Persisted dashboard session tokens."""
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
import uuid
from app.database import Base
from app.utils.dates import utcnow


class AuthToken(Base):
    """An issued JWT. Deleting the row revokes the token before it expires."""
    __tablename__ = "auth_tokens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String, nullable=False, unique=True, index=True)
    expires_at = Column(DateTime, nullable=False)
    last_used_at = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True, index=True)
