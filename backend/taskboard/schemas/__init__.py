from taskboard.schemas.member import MemberResponse, MemberRoleUpdate
from taskboard.schemas.profile import ProfileResponse, ProfileSummary, ProfileUpdate
from taskboard.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from taskboard.schemas.task import TaskCreate, TaskMove, TaskResponse, TaskUpdate

__all__ = [
    "ProfileResponse",
    "ProfileSummary",
    "ProfileUpdate",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "MemberResponse",
    "MemberRoleUpdate",
    "TaskCreate",
    "TaskUpdate",
    "TaskMove",
    "TaskResponse",
]
