"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.dependencies import get_token_service, get_user_context
from app.auth.principal import RequestContext
from app.auth.tokens import TokenService
from app.constants import API_V1_PREFIX
from app.database import get_db
from app.schemas.auth import LoginRequest, LoginResponse, MessageResponse, RegisterRequest, UserResponse
from app.services.users import UserService
from app.utils.exceptions import AppException, handle_database_error
from app.utils.logger import logger
from app.utils.serialization import serialize_datetime

router = APIRouter(prefix=f"{API_V1_PREFIX}/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Register a new dashboard account.

    New accounts always get the developer role.

    Args:
        request: Email, password (min 6 chars) and display name
        db: Database session

    Returns:
        The created user, without password data
    """
    try:
        user = UserService(db).register(request.email, request.password, request.name)
        return UserResponse.from_orm(user)
    except AppException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Registration failed for {request.email}: {e}", exc_info=True)
        raise handle_database_error(e, "register")


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> LoginResponse:
    """
    Check credentials and issue a session token.

    Args:
        request: Login credentials
        db: Database session
        tokens: Token service

    Returns:
        Token, its expiry and the user
    """
    try:
        user = UserService(db).authenticate(request.email, request.password)
        token, expires_at = tokens.issue(user)
        return LoginResponse(
            token=token,
            expires_at=serialize_datetime(expires_at),
            user=UserResponse.from_orm(user),
        )
    except AppException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Login error for {request.email}: {e}", exc_info=True)
        raise handle_database_error(e, "login")


@router.post("/logout", response_model=MessageResponse)
def logout(
    ctx: RequestContext = Depends(get_user_context),
    tokens: TokenService = Depends(get_token_service),
) -> MessageResponse:
    """Revoke the bearer token used for this request."""
    tokens.revoke(ctx.user.token)
    return MessageResponse(message="Logged out successfully")
