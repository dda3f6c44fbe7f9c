# tests/test_deadlines.py

from __future__ import annotations

import pytest

from taskflow.tasks.deadlines import (
    DUE_SOON_HORIZON_SECONDS,
    REMINDER_HORIZON_SECONDS,
    TaskSummary,
    classify,
    is_overdue,
    reminder_alerts,
    select_reminders,
    summarize,
    summary_alert,
)
from taskflow.tasks.task_models import Task, TaskStatus

from .conftest import HOUR, NOW


def make_task(
    task_id: int = 1,
    *,
    status: TaskStatus = TaskStatus.TODO,
    due_at: float | None = None,
    title: str | None = None,
) -> Task:
    return Task(
        id=task_id,
        title=title or f"task {task_id}",
        project_id=1,
        created_at=NOW - 10 * HOUR,
        status=status,
        due_at=due_at,
        assignee_id=2,
    )


# ---- classify ----


@pytest.mark.parametrize("due_at", [None, NOW - 100 * HOUR, NOW - 1, NOW, NOW + HOUR])
def test_done_tasks_are_never_reclassified(due_at) -> None:
    task = make_task(status=TaskStatus.DONE, due_at=due_at)
    assert classify(task, NOW) == TaskStatus.DONE


@pytest.mark.parametrize("status", list(TaskStatus))
def test_tasks_without_due_date_keep_status(status: TaskStatus) -> None:
    task = make_task(status=status, due_at=None)
    assert classify(task, NOW) == status


@pytest.mark.parametrize(
    "status", [TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.REVIEW, TaskStatus.OVERDUE]
)
def test_past_due_open_tasks_become_overdue(status: TaskStatus) -> None:
    task = make_task(status=status, due_at=NOW - 1)
    assert classify(task, NOW) == TaskStatus.OVERDUE
    assert is_overdue(task, NOW)


def test_task_due_exactly_now_is_not_overdue() -> None:
    task = make_task(status=TaskStatus.TODO, due_at=NOW)
    assert classify(task, NOW) == TaskStatus.TODO
    assert not is_overdue(task, NOW)


def test_future_task_keeps_status() -> None:
    task = make_task(status=TaskStatus.REVIEW, due_at=NOW + HOUR)
    assert classify(task, NOW) == TaskStatus.REVIEW


@pytest.mark.parametrize("status", list(TaskStatus))
@pytest.mark.parametrize("due_at", [None, NOW - HOUR, NOW, NOW + HOUR])
def test_classify_is_idempotent(status: TaskStatus, due_at) -> None:
    task = make_task(status=status, due_at=due_at)
    once = classify(task, NOW)
    task.status = once
    assert classify(task, NOW) == once


# ---- select_reminders ----


def test_reminder_window_is_half_open() -> None:
    at_now = make_task(1, due_at=NOW)
    at_edge = make_task(2, due_at=NOW + REMINDER_HORIZON_SECONDS)
    past_edge = make_task(3, due_at=NOW + REMINDER_HORIZON_SECONDS + 1)

    selected = select_reminders([at_now, at_edge, past_edge], NOW)
    assert [t.id for t in selected] == [2]


def test_reminders_skip_done_and_undated_tasks() -> None:
    tasks = [
        make_task(1, status=TaskStatus.DONE, due_at=NOW + HOUR),
        make_task(2, due_at=None),
        make_task(3, status=TaskStatus.IN_PROGRESS, due_at=NOW + HOUR),
    ]
    assert [t.id for t in select_reminders(tasks, NOW)] == [3]


def test_reminders_sorted_soonest_first() -> None:
    tasks = [
        make_task(1, due_at=NOW + 20 * HOUR),
        make_task(2, due_at=NOW + 2 * HOUR),
        make_task(3, due_at=NOW + 10 * HOUR),
        make_task(4, due_at=NOW + 2 * HOUR),
    ]
    assert [t.id for t in select_reminders(tasks, NOW)] == [2, 4, 3, 1]


def test_include_overdue_flag() -> None:
    flagged = make_task(1, status=TaskStatus.OVERDUE, due_at=NOW + HOUR)

    assert [t.id for t in select_reminders([flagged], NOW)] == [1]
    assert select_reminders([flagged], NOW, include_overdue=False) == []


def test_include_done_flag() -> None:
    finished = make_task(1, status=TaskStatus.DONE, due_at=NOW + HOUR)

    assert select_reminders([finished], NOW) == []
    assert [t.id for t in select_reminders([finished], NOW, include_done=True)] == [1]


def test_custom_reminder_horizon() -> None:
    task = make_task(1, due_at=NOW + 30 * HOUR)
    assert select_reminders([task], NOW) == []
    assert [t.id for t in select_reminders([task], NOW, horizon_seconds=48 * HOUR)] == [1]


# ---- summarize ----


def test_summary_buckets_sum_to_total() -> None:
    tasks = [
        make_task(1, status=TaskStatus.TODO),
        make_task(2, status=TaskStatus.TODO, due_at=NOW + HOUR),
        make_task(3, status=TaskStatus.IN_PROGRESS, due_at=NOW + 30 * HOUR),
        make_task(4, status=TaskStatus.REVIEW),
        make_task(5, status=TaskStatus.DONE, due_at=NOW + HOUR),
        make_task(6, status=TaskStatus.OVERDUE, due_at=NOW - HOUR),
    ]
    s = summarize(tasks, NOW)

    assert (s.todo, s.in_progress, s.review, s.done, s.overdue) == (2, 1, 1, 1, 1)
    assert s.todo + s.in_progress + s.review + s.done + s.overdue == s.total == 6
    # done task due in 1h is not "due soon"; the 30h one is inside the 48h horizon
    assert s.due_soon == 2


def test_due_soon_window_is_half_open() -> None:
    tasks = [
        make_task(1, due_at=NOW),
        make_task(2, due_at=NOW + DUE_SOON_HORIZON_SECONDS),
        make_task(3, due_at=NOW + DUE_SOON_HORIZON_SECONDS + 1),
    ]
    assert summarize(tasks, NOW).due_soon == 1


def test_summary_for_user_without_tasks_is_all_zero() -> None:
    s = summarize([], NOW)
    assert s == TaskSummary()
    assert s.as_dict() == {
        "todo": 0,
        "inProgress": 0,
        "review": 0,
        "done": 0,
        "overdue": 0,
        "dueSoon": 0,
        "total": 0,
    }


# ---- scenarios ----


def test_task_due_in_two_hours_is_reminded_and_due_soon() -> None:
    task = make_task(1, status=TaskStatus.TODO, due_at=NOW + 2 * HOUR)

    assert [t.id for t in select_reminders([task], NOW)] == [1]
    s = summarize([task], NOW)
    assert s.todo == 1
    assert s.due_soon == 1


def test_in_progress_task_past_due_shows_as_overdue_in_summary() -> None:
    task = make_task(1, status=TaskStatus.IN_PROGRESS, due_at=NOW - HOUR)

    task.status = classify(task, NOW)
    assert task.status == TaskStatus.OVERDUE

    s = summarize([task], NOW)
    assert s.overdue == 1
    assert s.in_progress == 0


def test_done_task_past_due_stays_done() -> None:
    task = make_task(1, status=TaskStatus.DONE, due_at=NOW - HOUR)
    assert classify(task, NOW) == TaskStatus.DONE


# ---- alerts ----


def test_reminder_alerts_truncate_and_roll_up() -> None:
    tasks = [make_task(i, due_at=NOW + i * HOUR, title=f"T{i}") for i in range(1, 6)]

    alerts = reminder_alerts(tasks, limit=3)

    assert len(alerts) == 4
    assert [a.title for a in alerts[:3]] == ["Task Deadline Reminder"] * 3
    assert alerts[0].description.startswith('"T1" is due on ')
    assert alerts[3].title == "Task Reminders"
    assert "5 tasks" in alerts[3].description
    assert all(a.variant == "warning" for a in alerts)


def test_reminder_roll_up_names_the_horizon() -> None:
    tasks = [make_task(i, due_at=NOW + i * HOUR) for i in range(1, 4)]

    default = reminder_alerts(tasks, limit=1)
    assert default[-1].description == "You have 3 tasks due in the next 24 hours."

    custom = reminder_alerts(tasks, limit=1, horizon_hours=6)
    assert custom[-1].description == "You have 3 tasks due in the next 6 hours."


def test_reminder_alerts_without_roll_up() -> None:
    tasks = [make_task(1, due_at=NOW + HOUR), make_task(2, due_at=NOW + 2 * HOUR)]
    alerts = reminder_alerts(tasks, limit=3)
    assert [a.title for a in alerts] == ["Task Deadline Reminder"] * 2


def test_summary_alert_only_when_attention_needed() -> None:
    assert summary_alert(TaskSummary(todo=3, total=3)) is None

    alert = summary_alert(TaskSummary(overdue=1, due_soon=2, todo=2, total=3))
    assert alert is not None
    assert alert.description == "You have 1 overdue tasks and 2 tasks due soon."
