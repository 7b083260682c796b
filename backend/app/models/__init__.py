"""Models package."""
from app.models.user import User
from app.models.project import Project
from app.models.project_user import ProjectUser
from app.models.auth_token import AuthToken
from app.models.device import Device
from app.models.event import Event
from app.models.metric import Metric

__all__ = ["User", "Project", "ProjectUser", "AuthToken", "Device", "Event", "Metric"]
