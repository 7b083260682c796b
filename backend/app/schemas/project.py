"""Schemas for projects and project membership."""
from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional

from app.constants import ProjectRole
from app.utils.serialization import serialize_datetime, serialize_uuid


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)


class ProjectUpdate(BaseModel):
    name: str = Field(..., min_length=1)


class ProjectResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    created_at: Optional[str]
    updated_at: Optional[str]

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj) -> "ProjectResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=serialize_uuid(obj.id),
            name=obj.name,
            owner_id=serialize_uuid(obj.owner_id),
            created_at=serialize_datetime(obj.created_at),
            updated_at=serialize_datetime(obj.updated_at),
        )


class ProjectWithKeyResponse(ProjectResponse):
    """Returned on creation so the caller can configure the SDK right away."""
    api_key: str

    @classmethod
    def from_orm(cls, obj) -> "ProjectWithKeyResponse":
        base = ProjectResponse.from_orm(obj)
        return cls(**base.model_dump(), api_key=obj.api_key)


class APIKeyResponse(BaseModel):
    api_key: str


class MemberCreate(BaseModel):
    """Add a member by user id or by email."""
    user_id: Optional[str] = None
    email: Optional[EmailStr] = None
    role: ProjectRole = ProjectRole.CONTRIBUTOR

    @model_validator(mode="after")
    def _one_identifier(self) -> "MemberCreate":
        if not self.user_id and not self.email:
            raise ValueError("user_id or email is required")
        return self


class MemberUpdate(BaseModel):
    role: ProjectRole


class MemberResponse(BaseModel):
    project_id: str
    user_id: str
    email: str
    name: str
    role: str
    created_at: Optional[str]

    @classmethod
    def from_orm(cls, obj) -> "MemberResponse":
        """Build from a ProjectUser row with its user loaded."""
        return cls(
            project_id=serialize_uuid(obj.project_id),
            user_id=serialize_uuid(obj.user_id),
            email=obj.user.email,
            name=obj.user.name,
            role=obj.role,
            created_at=serialize_datetime(obj.created_at),
        )
