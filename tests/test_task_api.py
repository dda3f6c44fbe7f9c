# tests/test_task_api.py

from __future__ import annotations

import pytest

from taskflow.core.errors import NotFoundError, PermissionDeniedError
from taskflow.tasks.task_api import (
    get_daily_summary,
    get_project,
    get_task_reminders,
    list_project_tasks,
    list_user_projects,
    update_overdue,
)
from taskflow.tasks.task_models import TaskStatus

from .conftest import HOUR, NOW


@pytest.fixture()
def shared(state, admin, alex):
    store = state.task_store
    project = store.create_project(name="Shared", owner_id=admin.id)
    store.add_member(project_id=project.id, user_id=alex.id)
    return project


def test_reminders_for_user(state, shared, alex) -> None:
    store = state.task_store
    t1 = store.create_task(title="in 2h", project_id=shared.id, due_at=NOW + 2 * HOUR,
                           assignee_id=alex.id)
    store.create_task(title="in 2 days", project_id=shared.id, due_at=NOW + 48 * HOUR,
                      assignee_id=alex.id)

    reminders = get_task_reminders(state, alex.id, now=NOW)
    assert [t.id for t in reminders] == [t1.id]


def test_reminders_respect_include_overdue_setting(state, shared, alex) -> None:
    store = state.task_store
    flagged = store.create_task(title="flagged", project_id=shared.id, due_at=NOW + HOUR,
                                assignee_id=alex.id)
    store.update_task_status(flagged.id, TaskStatus.OVERDUE)

    assert len(get_task_reminders(state, alex.id, now=NOW)) == 1
    state.settings.reminders_include_overdue = False
    assert get_task_reminders(state, alex.id, now=NOW) == []


def test_summary_after_on_demand_sweep(state, shared, alex) -> None:
    store = state.task_store
    store.create_task(title="late", project_id=shared.id, due_at=NOW - HOUR,
                      status=TaskStatus.IN_PROGRESS, assignee_id=alex.id)

    before = get_daily_summary(state, alex.id, now=NOW)
    assert before.in_progress == 1
    assert before.overdue == 0

    report = update_overdue(state, alex.id, now=NOW)
    assert report.changed == 1

    after = get_daily_summary(state, alex.id, now=NOW)
    assert after.overdue == 1
    assert after.in_progress == 0
    assert after.total == 1


def test_summary_for_user_with_no_tasks(state, admin) -> None:
    assert get_daily_summary(state, admin.id, now=NOW).as_dict()["total"] == 0


def test_unknown_user_is_not_found(state) -> None:
    with pytest.raises(NotFoundError):
        get_daily_summary(state, 999, now=NOW)
    with pytest.raises(NotFoundError):
        get_task_reminders(state, 999, now=NOW)


def test_project_visibility(state, shared, admin, alex) -> None:
    store = state.task_store
    private = store.create_project(name="Private", owner_id=admin.id)
    store.create_task(title="x", project_id=shared.id)

    assert [p.name for p in list_user_projects(state, alex.id)] == ["Shared"]
    assert [p.name for p in list_user_projects(state, admin.id)] == ["Shared", "Private"]

    assert get_project(state, alex.id, shared.id).id == shared.id
    assert [t.title for t in list_project_tasks(state, alex.id, shared.id)] == ["x"]

    with pytest.raises(PermissionDeniedError):
        get_project(state, alex.id, private.id)
    with pytest.raises(PermissionDeniedError):
        list_project_tasks(state, alex.id, private.id)
    with pytest.raises(NotFoundError):
        get_project(state, alex.id, 12345)


def test_reminders_respect_include_done_setting(state, shared, alex) -> None:
    store = state.task_store
    store.create_task(title="finished early", project_id=shared.id, due_at=NOW + HOUR,
                      status=TaskStatus.DONE, assignee_id=alex.id)

    assert get_task_reminders(state, alex.id, now=NOW) == []
    state.settings.reminders_include_done = True
    assert len(get_task_reminders(state, alex.id, now=NOW)) == 1


def test_admin_lists_every_project_through_access_check(state, shared, admin, alex) -> None:
    other = state.task_store.create_project(name="Alex only", owner_id=alex.id)

    assert [p.id for p in list_user_projects(state, admin.id)] == [shared.id, other.id]
    assert [p.id for p in list_user_projects(state, alex.id)] == [shared.id, other.id]
