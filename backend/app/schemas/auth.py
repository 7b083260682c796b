"""Schemas for authentication and user accounts."""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from app.constants import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH, UserRole
from app.utils.serialization import serialize_datetime, serialize_uuid


def _check_password_bytes(value: Optional[str]) -> Optional[str]:
    # Counted in UTF-8 bytes, not characters
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def _password_fits(cls, value: Optional[str]) -> Optional[str]:
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH)

    @field_validator("password")
    @classmethod
    def _password_fits(cls, value: Optional[str]) -> Optional[str]:
        return _check_password_bytes(value)


class UpdateRoleRequest(BaseModel):
    role: UserRole


class UserResponse(BaseModel):
    """User as exposed by the API. Never carries the password hash."""
    id: str
    email: str
    name: str
    role: str
    created_at: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj) -> "UserResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=serialize_uuid(obj.id),
            email=obj.email,
            name=obj.name,
            role=obj.role,
            created_at=serialize_datetime(obj.created_at),
        )


class LoginResponse(BaseModel):
    token: str
    expires_at: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
