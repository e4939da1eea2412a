from taskboard.models.base import Base
from taskboard.models.invitation import Invitation
from taskboard.models.profile import Profile
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard.models.task import Task

__all__ = [
    "Base",
    "Profile",
    "Project",
    "ProjectMember",
    "Task",
    "Invitation",
]
