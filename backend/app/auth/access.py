"""Project-level access control for dashboard and analytics requests.

Decision rule for a user against a project:

1. global admin: allow
2. project owner: allow
3. ProjectUser membership row: allow
4. otherwise: deny

An API-key principal may only ever act on its own project.

Existence is checked before access, so an unknown project id reports
"not found" while a known project without access reports "forbidden".
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Query, Session

from app.auth.principal import Principal, ProjectPrincipal, UserPrincipal
from app.constants import ProjectRole
from app.models import Project, ProjectUser
from app.utils.db import active, get_by_id
from app.utils.exceptions import AuthorizationError


class AccessLevel(str, Enum):
    READ = "read"  # view project, key, members, analytics
    MANAGE = "manage"  # edit project, rotate key, manage members
    OWN = "own"  # delete project


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(False, reason)


class AccessControl:
    """Resolves whether a principal may act on a project."""

    def __init__(self, db: Session):
        self.db = db

    def membership(self, project_id: UUID, user_id: UUID) -> Optional[ProjectUser]:
        return self.db.query(ProjectUser).filter(
            ProjectUser.project_id == project_id,
            ProjectUser.user_id == user_id,
        ).first()

    def decide(
        self,
        principal: Principal,
        project: Project,
        level: AccessLevel = AccessLevel.READ,
    ) -> Decision:
        """Decide access for an already loaded, live project."""
        if isinstance(principal, ProjectPrincipal):
            if principal.project_id == project.id:
                return Decision.allow()
            return Decision.deny("API key does not belong to this project")

        if principal.is_admin:
            return Decision.allow()
        if project.owner_id == principal.user_id:
            return Decision.allow()
        if level is AccessLevel.OWN:
            return Decision.deny("Only the project owner can do this")

        member = self.membership(project.id, principal.user_id)
        if member is None:
            return Decision.deny("Not a member of this project")
        if level is AccessLevel.MANAGE and member.role != ProjectRole.ADMIN.value:
            return Decision.deny("Project admin role required")
        return Decision.allow()

    def authorize(
        self,
        principal: Principal,
        target_project_id: UUID,
        level: AccessLevel = AccessLevel.READ,
    ) -> Decision:
        """Allow/deny a principal against a project id."""
        project = active(self.db.query(Project), Project).filter(Project.id == target_project_id).first()
        if project is None:
            return Decision.deny("Project not found")
        return self.decide(principal, project, level)

    def require_project(
        self,
        principal: Principal,
        project_id: str | UUID,
        level: AccessLevel = AccessLevel.READ,
    ) -> Project:
        """
        Load a project and enforce access.

        Raises:
            ValidationError: If the id is not a UUID
            NotFoundError: If the project does not exist
            AuthorizationError: If the principal may not act on it
        """
        project = get_by_id(self.db, Project, project_id, "Project")
        decision = self.decide(principal, project, level)
        if not decision.allowed:
            raise AuthorizationError(f"Access denied: {decision.reason}")
        return project

    def accessible_projects(self, principal: UserPrincipal) -> Query:
        """Owned projects, member projects, or every project for admins."""
        query = active(self.db.query(Project), Project)
        if not principal.is_admin:
            member_of = select(ProjectUser.project_id).where(ProjectUser.user_id == principal.user_id)
            query = query.filter(or_(
                Project.owner_id == principal.user_id,
                Project.id.in_(member_of),
            ))
        return query.order_by(Project.created_at.asc())
