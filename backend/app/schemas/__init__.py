"""Pydantic schemas for request/response validation."""
from app.schemas.telemetry import EventPayload, EventBatchRequest, IngestResponse
from app.schemas.auth import RegisterRequest, LoginRequest, LoginResponse, UserResponse
from app.schemas.project import ProjectResponse, ProjectWithKeyResponse, MemberResponse

__all__ = [
    "EventPayload",
    "EventBatchRequest",
    "IngestResponse",
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "UserResponse",
    "ProjectResponse",
    "ProjectWithKeyResponse",
    "MemberResponse",
]
