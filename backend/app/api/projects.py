"""Projects API endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.dependencies import get_user_context
from app.auth.principal import RequestContext
from app.constants import API_V1_PREFIX
from app.database import get_db
from app.schemas.auth import MessageResponse
from app.schemas.project import (
    APIKeyResponse,
    MemberCreate,
    MemberResponse,
    MemberUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    ProjectWithKeyResponse,
)
from app.services.projects import ProjectService
from app.utils.exceptions import AppException, handle_database_error
from app.utils.logger import logger

router = APIRouter(prefix=f"{API_V1_PREFIX}/dashboard/projects", tags=["projects"])


@router.get("", response_model=list[ProjectResponse])
def get_projects(
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> list[ProjectResponse]:
    """
    Get all projects the user can access.

    Admins see every project; everyone else sees projects they own or
    are a member of.
    """
    projects = ProjectService(db).list_for(ctx.user)
    return [ProjectResponse.from_orm(p) for p in projects]


@router.post("", response_model=ProjectWithKeyResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project: ProjectCreate,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> ProjectWithKeyResponse:
    """
    Create a new project owned by the caller.

    Args:
        project: Project creation data
        ctx: Request context
        db: Database session

    Returns:
        Created project, including its generated API key
    """
    try:
        new_project = ProjectService(db).create(ctx.user, project.name)
        return ProjectWithKeyResponse.from_orm(new_project)
    except AppException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create project: {e}", exc_info=True)
        raise handle_database_error(e, "create_project")


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> ProjectResponse:
    """Get a specific project. 404 if unknown, 403 if inaccessible."""
    return ProjectResponse.from_orm(ProjectService(db).get(ctx.user, project_id))


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> ProjectResponse:
    """
    Rename a project.

    Args:
        project_id: The project to update
        project_update: Updated project data
        ctx: Request context (owner, admin or project admin)
        db: Database session

    Returns:
        Updated project
    """
    try:
        project = ProjectService(db).update(ctx.user, project_id, project_update.name)
        return ProjectResponse.from_orm(project)
    except AppException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update project {project_id}: {e}", exc_info=True)
        raise handle_database_error(e, "update_project")


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: str,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """
    Delete a project. Only the owner or an admin may do this.

    The project is tombstoned; its devices, events and metrics are kept
    but no longer reachable.
    """
    try:
        ProjectService(db).delete(ctx.user, project_id)
        return MessageResponse(message="Project deleted successfully")
    except AppException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete project {project_id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete_project")


@router.get("/{project_id}/api-key", response_model=APIKeyResponse)
def get_api_key(
    project_id: str,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> APIKeyResponse:
    return APIKeyResponse(api_key=ProjectService(db).get_api_key(ctx.user, project_id))


@router.post("/{project_id}/api-key/regenerate", response_model=APIKeyResponse)
def regenerate_api_key(
    project_id: str,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> APIKeyResponse:
    """Issue a new API key. The previous key stops working immediately."""
    try:
        return APIKeyResponse(api_key=ProjectService(db).regenerate_api_key(ctx.user, project_id))
    except AppException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to regenerate API key for project {project_id}: {e}", exc_info=True)
        raise handle_database_error(e, "regenerate_api_key")


@router.get("/{project_id}/users", response_model=list[MemberResponse])
def get_project_users(
    project_id: str,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> list[MemberResponse]:
    members = ProjectService(db).list_members(ctx.user, project_id)
    return [MemberResponse.from_orm(m) for m in members]


@router.post("/{project_id}/users", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
def add_project_user(
    project_id: str,
    request: MemberCreate,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> MemberResponse:
    """Grant a user access to the project by id or email."""
    try:
        member = ProjectService(db).add_member(
            ctx.user,
            project_id,
            request.role,
            user_id=request.user_id,
            email=request.email,
        )
        return MemberResponse.from_orm(member)
    except AppException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to add member to project {project_id}: {e}", exc_info=True)
        raise handle_database_error(e, "add_project_user")


@router.put("/{project_id}/users/{user_id}", response_model=MemberResponse)
def update_project_user(
    project_id: str,
    user_id: str,
    request: MemberUpdate,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> MemberResponse:
    member = ProjectService(db).update_member(ctx.user, project_id, user_id, request.role)
    return MemberResponse.from_orm(member)


@router.delete("/{project_id}/users/{user_id}", response_model=MessageResponse)
def remove_project_user(
    project_id: str,
    user_id: str,
    ctx: RequestContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> MessageResponse:
    ProjectService(db).remove_member(ctx.user, project_id, user_id)
    return MessageResponse(message="User removed from project")
