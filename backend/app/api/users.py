"""Current-user and admin user management endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.auth import logout
from app.auth.dependencies import get_token_service, get_user_context, require_admin
from app.auth.principal import RequestContext
from app.auth.tokens import TokenService
from app.constants import API_V1_PREFIX
from app.database import get_db
from app.schemas.auth import MessageResponse, UpdateProfileRequest, UpdateRoleRequest, UserResponse
from app.services.users import UserService

router = APIRouter(prefix=f"{API_V1_PREFIX}/dashboard/user", tags=["users"])
admin_router = APIRouter(prefix=f"{API_V1_PREFIX}/admin/users", tags=["admin"])


@router.get("/me", response_model=UserResponse)
def get_me(
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Return the authenticated user."""
    return UserResponse.from_orm(UserService(db).get(ctx.user.user_id))


@router.put("/me", response_model=UserResponse)
def update_me(
    request: UpdateProfileRequest,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Change the display name and/or password of the authenticated user."""
    service = UserService(db)
    user = service.update_profile(service.get(ctx.user.user_id), name=request.name, password=request.password)
    return UserResponse.from_orm(user)


router.add_api_route("/logout", logout, methods=["POST"], response_model=MessageResponse)


@admin_router.get("", response_model=list[UserResponse])
def list_users(
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[UserResponse]:
    return [UserResponse.from_orm(u) for u in UserService(db).list_users()]


@admin_router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserResponse:
    return UserResponse.from_orm(UserService(db).get(user_id))


@admin_router.put("/{user_id}/role", response_model=UserResponse)
def set_user_role(
    user_id: str,
    request: UpdateRoleRequest,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Promote or demote a user globally."""
    return UserResponse.from_orm(UserService(db).set_role(ctx.user.user_id, user_id, request.role))


@admin_router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> MessageResponse:
    """Soft-delete a user and revoke their sessions."""
    UserService(db).delete(ctx.user.user_id, user_id, tokens)
    return MessageResponse(message="User deleted successfully")
