# src/taskflow/core/access.py

from __future__ import annotations

"""
Authorization capability checks.

Every query and command asks `can(...)` instead of testing roles inline.

Rules:
- admins can do everything, including listing every project
- project owners can do everything on their project
- members can view the project and work on its tasks
- nobody else can see a project
- any user can create projects and trigger the overdue sweep
"""

from collections.abc import Collection
from enum import StrEnum

from ..tasks.task_models import Project, User
from .errors import PermissionDeniedError


class Action(StrEnum):
    VIEW_PROJECT = "view_project"
    EDIT_PROJECT = "edit_project"
    DELETE_PROJECT = "delete_project"
    MANAGE_MEMBERS = "manage_members"
    EDIT_TASKS = "edit_tasks"
    CREATE_PROJECT = "create_project"
    RUN_AUTOMATION = "run_automation"
    VIEW_ALL_PROJECTS = "view_all_projects"


_MEMBER_ACTIONS = frozenset({Action.VIEW_PROJECT, Action.EDIT_TASKS})
_OWNER_ACTIONS = frozenset(
    {
        Action.VIEW_PROJECT,
        Action.EDIT_PROJECT,
        Action.DELETE_PROJECT,
        Action.MANAGE_MEMBERS,
        Action.EDIT_TASKS,
    }
)


def can(
    user: User | None,
    action: Action,
    project: Project | None = None,
    *,
    member_ids: Collection[int] = (),
) -> bool:
    if user is None:
        return False
    if user.is_admin:
        return True

    if action in (Action.CREATE_PROJECT, Action.RUN_AUTOMATION):
        return True

    if project is None:
        return False
    if project.owner_id == user.id:
        return action in _OWNER_ACTIONS
    if user.id in member_ids:
        return action in _MEMBER_ACTIONS
    return False


def require(
    user: User | None,
    action: Action,
    project: Project | None = None,
    *,
    member_ids: Collection[int] = (),
) -> None:
    """Raise PermissionDeniedError unless `can(...)` allows the action."""
    if not can(user, action, project, member_ids=member_ids):
        raise PermissionDeniedError(user.id if user else None, action.value)
