"""API key authentication utilities."""
from typing import Optional
from fastapi import Header, Depends, Request
from sqlalchemy.orm import Session

from app.auth.principal import ProjectPrincipal, RequestContext
from app.constants import API_KEY_HEADER
from app.database import get_db
from app.models.project import Project
from app.utils.db import active
from app.utils.exceptions import AuthenticationError


def client_ip(request: Request) -> str:
    """
    Observed caller address.

    The first X-Forwarded-For hop is used only when the app is configured to
    trust proxy headers; otherwise callers could choose their recorded IP.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and request.app.state.settings.trust_proxy_headers:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


def get_project_by_api_key(db: Session, api_key: Optional[str]) -> Project:
    """
    Find the live project owning an API key.

    Args:
        db: Database session
        api_key: Raw key from the request header

    Returns:
        Project instance

    Raises:
        AuthenticationError: If the key is missing or matches no live project
    """
    if not api_key:
        raise AuthenticationError("API key is required")

    project = active(db.query(Project), Project).filter(Project.api_key == api_key).first()
    if not project:
        raise AuthenticationError("Invalid API key")

    return project


def get_sdk_context(
    request: Request,
    api_key: Optional[str] = Header(None, alias=API_KEY_HEADER, description="Project API key"),
    db: Session = Depends(get_db),
) -> RequestContext:
    """Dependency for SDK endpoints. API key is required."""
    project = get_project_by_api_key(db, api_key)
    return RequestContext(principal=ProjectPrincipal(project_id=project.id), client_ip=client_ip(request))
