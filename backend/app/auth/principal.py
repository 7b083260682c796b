"""Authenticated identities attached to a request."""
from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID

from app.constants import UserRole


@dataclass(frozen=True)
class ProjectPrincipal:
    """An SDK caller, scoped to the single project its API key belongs to."""
    project_id: UUID


@dataclass(frozen=True)
class UserPrincipal:
    """A dashboard user resolved from a session token."""
    user_id: UUID
    role: str
    email: str
    token: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


Principal = Union[ProjectPrincipal, UserPrincipal]


@dataclass(frozen=True)
class RequestContext:
    """Produced once by authentication and passed explicitly to handlers."""
    principal: Principal
    client_ip: str = ""

    @property
    def user(self) -> UserPrincipal:
        if not isinstance(self.principal, UserPrincipal):
            raise TypeError("Request is not authenticated as a user")
        return self.principal
