"""FastAPI dependencies that build the request context for dashboard routes."""
from typing import Optional
from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.auth.api_key import client_ip, get_project_by_api_key
from app.auth.principal import ProjectPrincipal, RequestContext
from app.auth.tokens import TokenService
from app.config import Settings
from app.constants import API_KEY_HEADER
from app.database import get_db
from app.utils.exceptions import AuthenticationError, AuthorizationError

_bearer = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TokenService:
    return TokenService(db, settings)


def _user_context(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials],
    tokens: TokenService,
) -> RequestContext:
    if not creds or not creds.credentials:
        raise AuthenticationError("Missing or malformed bearer token")
    principal = tokens.validate(creds.credentials)
    return RequestContext(principal=principal, client_ip=client_ip(request))


def get_user_context(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> RequestContext:
    """Dependency for dashboard routes: a valid bearer token is required."""
    return _user_context(request, creds, tokens)


def require_admin(ctx: RequestContext = Depends(get_user_context)) -> RequestContext:
    if not ctx.user.is_admin:
        raise AuthorizationError("Admin access required")
    return ctx


def get_analytics_context(
    request: Request,
    api_key: Optional[str] = Header(None, alias=API_KEY_HEADER),
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> RequestContext:
    """Analytics accept either an SDK API key or a dashboard bearer token."""
    if api_key:
        project = get_project_by_api_key(db, api_key)
        return RequestContext(principal=ProjectPrincipal(project_id=project.id), client_ip=client_ip(request))
    return _user_context(request, creds, tokens)
