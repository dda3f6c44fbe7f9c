# src/taskflow/tasks/task_api.py

from __future__ import annotations

"""
On-demand queries behind the dashboard/calendar views.

Each helper resolves the acting user, checks access through core.access and
then reads from state.task_store. Derived views (reminders, summary) are
computed fresh on every call; nothing here is cached.
"""

import logging
import time

from ..core.access import Action, can, require
from ..core.errors import NotFoundError
from ..core.state import AppState
from .deadlines import TaskSummary, select_reminders, summarize
from .task_models import Project, Task, User
from .task_scheduler import JobReport, sweep_overdue

logger = logging.getLogger(__name__)


def _user(state: AppState, user_id: int) -> User:
    user = state.task_store.get_user(user_id)
    if user is None:
        raise NotFoundError("user", user_id)
    return user


def _reminder_horizon_seconds(state: AppState) -> float:
    return float(getattr(state.settings, "reminder_horizon_hours", 24.0)) * 3600.0


def _due_soon_horizon_seconds(state: AppState) -> float:
    return float(getattr(state.settings, "due_soon_horizon_hours", 48.0)) * 3600.0


def get_task_reminders(state: AppState, user_id: int, now: float | None = None) -> list[Task]:
    """Tasks assigned to the user that are due within the reminder window, soonest first."""
    _user(state, user_id)
    now_ts = time.time() if now is None else now

    tasks = state.task_store.list_tasks_for_user(user_id)
    return select_reminders(
        tasks,
        now_ts,
        horizon_seconds=_reminder_horizon_seconds(state),
        include_overdue=bool(getattr(state.settings, "reminders_include_overdue", True)),
        include_done=bool(getattr(state.settings, "reminders_include_done", False)),
    )


def get_daily_summary(state: AppState, user_id: int, now: float | None = None) -> TaskSummary:
    _user(state, user_id)
    now_ts = time.time() if now is None else now

    tasks = state.task_store.list_tasks_for_user(user_id)
    return summarize(tasks, now_ts, horizon_seconds=_due_soon_horizon_seconds(state))


def update_overdue(state: AppState, user_id: int, now: float | None = None) -> JobReport:
    """Run the overdue sweep on demand (same job the scheduler runs hourly)."""
    require(_user(state, user_id), Action.RUN_AUTOMATION)
    now_ts = time.time() if now is None else now

    limit = int(getattr(state.settings, "sweep_batch_limit", 0) or 0)
    report = sweep_overdue(state.task_store, now_ts, limit=limit)
    logger.info("On-demand overdue sweep by user_id=%s changed=%d", user_id, report.changed)
    return report


def list_user_projects(state: AppState, user_id: int) -> list[Project]:
    """Projects the user owns or is a member of (every project for users allowed to view all)."""
    user = _user(state, user_id)
    if can(user, Action.VIEW_ALL_PROJECTS):
        return state.task_store.list_projects()
    return state.task_store.list_user_projects(user_id)


def get_project(state: AppState, user_id: int, project_id: int) -> Project:
    user = _user(state, user_id)
    project = state.task_store.get_project(project_id)
    if project is None:
        raise NotFoundError("project", project_id)

    require(
        user,
        Action.VIEW_PROJECT,
        project,
        member_ids=state.task_store.list_member_ids(project_id),
    )
    return project


def list_project_tasks(state: AppState, user_id: int, project_id: int) -> list[Task]:
    get_project(state, user_id, project_id)
    return state.task_store.list_project_tasks(project_id)
