"""Project management: CRUD, API key rotation and membership."""
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from app.auth.access import AccessControl, AccessLevel
from app.auth.principal import UserPrincipal
from app.constants import ProjectRole
from app.models import Project, ProjectUser, User
from app.utils.db import active, get_by_id, parse_uuid, soft_delete
from app.utils.exceptions import ConflictError, NotFoundError, ValidationError
from app.utils.hashing import generate_api_key
from app.utils.logger import logger


class ProjectService:
    def __init__(self, db: Session, access: Optional[AccessControl] = None):
        self.db = db
        self.access = access or AccessControl(db)

    def list_for(self, principal: UserPrincipal) -> List[Project]:
        return self.access.accessible_projects(principal).all()

    def get(self, principal: UserPrincipal, project_id: str) -> Project:
        return self.access.require_project(principal, project_id, AccessLevel.READ)

    def create(self, principal: UserPrincipal, name: str) -> Project:
        """Create a project owned by the caller, with a fresh API key."""
        project = Project(
            id=uuid.uuid4(),
            name=name,
            owner_id=principal.user_id,
            api_key=generate_api_key(),
        )
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)

        logger.info(f"Created project {project.id} for user {principal.user_id}")
        return project

    def update(self, principal: UserPrincipal, project_id: str, name: str) -> Project:
        project = self.access.require_project(principal, project_id, AccessLevel.MANAGE)
        project.name = name
        self.db.commit()
        self.db.refresh(project)
        return project

    def delete(self, principal: UserPrincipal, project_id: str) -> None:
        """Soft-delete a project. Its API key stops resolving immediately."""
        project = self.access.require_project(principal, project_id, AccessLevel.OWN)
        soft_delete(project)
        self.db.commit()
        logger.info(f"Deleted project {project.id} by user {principal.user_id}")

    def get_api_key(self, principal: UserPrincipal, project_id: str) -> str:
        return self.access.require_project(principal, project_id, AccessLevel.READ).api_key

    def regenerate_api_key(self, principal: UserPrincipal, project_id: str) -> str:
        """Replace the key in place; the old key is rejected from the next request on."""
        project = self.access.require_project(principal, project_id, AccessLevel.MANAGE)
        project.api_key = generate_api_key()
        self.db.commit()
        self.db.refresh(project)

        logger.info(f"Regenerated API key for project {project.id}")
        return project.api_key

    # Membership

    def list_members(self, principal: UserPrincipal, project_id: str) -> List[ProjectUser]:
        project = self.access.require_project(principal, project_id, AccessLevel.READ)
        return (
            self.db.query(ProjectUser)
            .options(joinedload(ProjectUser.user))
            .join(User, ProjectUser.user_id == User.id)
            .filter(ProjectUser.project_id == project.id, User.deleted_at.is_(None))
            .order_by(ProjectUser.created_at.asc())
            .all()
        )

    def add_member(
        self,
        principal: UserPrincipal,
        project_id: str,
        role: ProjectRole,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
    ) -> ProjectUser:
        project = self.access.require_project(principal, project_id, AccessLevel.MANAGE)

        if user_id:
            user = get_by_id(self.db, User, user_id, "User")
        else:
            user = active(self.db.query(User), User).filter(User.email == email).first()
            if not user:
                raise NotFoundError("User")

        if user.id == project.owner_id:
            raise ValidationError("The project owner is already a member")
        if self.access.membership(project.id, user.id):
            raise ConflictError("User is already a member of this project")

        member = ProjectUser(project_id=project.id, user_id=user.id, role=role.value)
        self.db.add(member)
        self.db.commit()
        self.db.refresh(member)

        logger.info(f"Added user {user.id} to project {project.id} as {role.value}")
        return member

    def update_member(self, principal: UserPrincipal, project_id: str, user_id: str, role: ProjectRole) -> ProjectUser:
        project = self.access.require_project(principal, project_id, AccessLevel.MANAGE)
        member = self._member(project.id, user_id)
        member.role = role.value
        self.db.commit()
        self.db.refresh(member)
        return member

    def remove_member(self, principal: UserPrincipal, project_id: str, user_id: str) -> None:
        project = self.access.require_project(principal, project_id, AccessLevel.MANAGE)
        member = self._member(project.id, user_id)
        member_user_id = member.user_id
        self.db.delete(member)
        self.db.commit()
        logger.info(f"Removed user {member_user_id} from project {project.id}")

    def _member(self, project_id: uuid.UUID, user_id: str) -> ProjectUser:
        member = self.access.membership(project_id, parse_uuid(user_id, "user ID"))
        if not member:
            raise NotFoundError("Project member")
        return member
