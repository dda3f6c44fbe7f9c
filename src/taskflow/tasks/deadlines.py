# src/taskflow/tasks/deadlines.py

from __future__ import annotations

"""
Deadline rules.

Pure functions over tasks and a reference timestamp (epoch seconds):
- classify: should a task now be overdue?
- select_reminders: which tasks are due within the reminder lookahead?
- summarize: per-status counts plus a "due soon" count.

Nothing here reads the clock or touches the store; callers pass `now` in.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from .task_models import Task, TaskStatus

REMINDER_HORIZON_SECONDS = 24 * 60 * 60
DUE_SOON_HORIZON_SECONDS = 48 * 60 * 60
REMINDER_ALERT_LIMIT = 3


def classify(task: Task, now: float) -> TaskStatus:
    """
    Return the status the task should have at `now`.

    Done tasks and tasks without a due date keep their status.
    Anything else that is past its due date becomes overdue.
    """
    if task.status == TaskStatus.DONE:
        return task.status
    if task.due_at is None:
        return task.status
    if task.due_at < now:
        return TaskStatus.OVERDUE
    return task.status


def is_overdue(task: Task, now: float) -> bool:
    return classify(task, now) == TaskStatus.OVERDUE


def due_within(task: Task, now: float, horizon_seconds: float) -> bool:
    """True if due_at falls in the half-open window (now, now + horizon]."""
    if task.due_at is None:
        return False
    return now < task.due_at <= now + horizon_seconds


def select_reminders(
    tasks: Iterable[Task],
    now: float,
    *,
    horizon_seconds: float = REMINDER_HORIZON_SECONDS,
    include_overdue: bool = True,
    include_done: bool = False,
) -> list[Task]:
    """
    Tasks due within the lookahead window, soonest first.

    Done tasks are skipped unless include_done is set. Tasks already flagged
    overdue are selected only when include_overdue is set (they can still be in
    the window if the sweep flagged them before their due_at moved).
    """
    out: list[Task] = []
    for task in tasks:
        if task.status == TaskStatus.DONE and not include_done:
            continue
        if task.status == TaskStatus.OVERDUE and not include_overdue:
            continue
        if due_within(task, now, horizon_seconds):
            out.append(task)

    # due_at is never None here (due_within filtered it)
    out.sort(key=lambda t: (t.due_at or 0.0, t.id))
    return out


@dataclass(slots=True, frozen=True)
class TaskSummary:
    todo: int = 0
    in_progress: int = 0
    review: int = 0
    done: int = 0
    overdue: int = 0
    due_soon: int = 0
    total: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "todo": self.todo,
            "inProgress": self.in_progress,
            "review": self.review,
            "done": self.done,
            "overdue": self.overdue,
            "dueSoon": self.due_soon,
            "total": self.total,
        }


def summarize(
    tasks: Iterable[Task],
    now: float,
    *,
    horizon_seconds: float = DUE_SOON_HORIZON_SECONDS,
) -> TaskSummary:
    """
    Count tasks per status plus the non-done tasks due within the horizon.

    The five status counts are disjoint and add up to total.
    due_soon overlaps them.
    """
    counts = {status: 0 for status in TaskStatus}
    due_soon = 0
    total = 0

    for task in tasks:
        counts[task.status] += 1
        total += 1
        if task.status != TaskStatus.DONE and due_within(task, now, horizon_seconds):
            due_soon += 1

    return TaskSummary(
        todo=counts[TaskStatus.TODO],
        in_progress=counts[TaskStatus.IN_PROGRESS],
        review=counts[TaskStatus.REVIEW],
        done=counts[TaskStatus.DONE],
        overdue=counts[TaskStatus.OVERDUE],
        due_soon=due_soon,
        total=total,
    )


# ---- alert rendering ----


@dataclass(slots=True, frozen=True)
class Alert:
    """A transient notification as shown by the UI (toast)."""

    title: str
    description: str
    variant: str = "default"


def _format_due(due_at: float) -> str:
    dt = datetime.fromtimestamp(due_at)
    return f"{dt:%b} {dt.day}, {dt:%Y}"


def format_hours(hours: float) -> str:
    """24.0 -> "24", 1.5 -> "1.5"."""
    return f"{float(hours):g}"


def reminder_alerts(
    reminders: list[Task],
    *,
    limit: int = REMINDER_ALERT_LIMIT,
    horizon_hours: float = REMINDER_HORIZON_SECONDS / 3600.0,
) -> list[Alert]:
    """
    One alert per reminder for the first `limit` tasks, plus a roll-up alert
    when there are more than `limit`.
    """
    alerts = [
        Alert(
            title="Task Deadline Reminder",
            description=(
                f'"{task.title}" is due on {_format_due(task.due_at)}.'
                if task.due_at is not None
                else f'"{task.title}" is due soon.'
            ),
            variant="warning",
        )
        for task in reminders[: max(0, limit)]
    ]

    if len(reminders) > limit:
        alerts.append(
            Alert(
                title="Task Reminders",
                description=(
                    f"You have {len(reminders)} tasks due in the next "
                    f"{format_hours(horizon_hours)} hours."
                ),
                variant="warning",
            )
        )
    return alerts


def summary_alert(summary: TaskSummary) -> Alert | None:
    """The daily summary alert, only when something needs attention."""
    if summary.overdue <= 0 and summary.due_soon <= 0:
        return None
    return Alert(
        title="Daily Task Summary",
        description=(
            f"You have {summary.overdue} overdue tasks and {summary.due_soon} tasks due soon."
        ),
    )
