# src/taskflow/cli/commands.py

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.access import Action, can
from ..core.errors import TaskFlowError
from ..core.state import AppState
from ..tasks.deadlines import format_hours, reminder_alerts, summary_alert
from ..tasks.task_api import (
    get_daily_summary,
    get_task_reminders,
    list_project_tasks,
    list_user_projects,
    update_overdue,
)
from ..tasks.task_models import Task, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler3 = Callable[[AppState, list[str], int | None], str]
CommandHandler4 = Callable[[AppState, list[str], int | None, CommandEmitter | None], str]
CommandHandler = CommandHandler3 | CommandHandler4

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /summary, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        user_id: int | None = None,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 4

        try:
            if nparams >= 4:
                h4 = cast(CommandHandler4, handler)
                return h4(state, args, user_id, emit)

            h3 = cast(CommandHandler3, handler)
            return h3(state, args, user_id)
        except TaskFlowError as e:
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _fmt_ts(ts: float | None) -> str:
    if ts is None:
        return "no due date"
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def _fmt_task(task: Task) -> str:
    return (
        f"#{task.id} [{task.status.value}] ({task.priority.value}) "
        f"{task.title} - due {_fmt_ts(task.due_at)}"
    )


_NO_USER = "No acting user. Use /as <username> first."


def cmd_help(
    state: AppState,
    args: list[str],
    user_id: int | None,
    emit: CommandEmitter | None = None,
) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], user_id: int | None) -> str:
    s = state.settings
    sched = state.scheduler
    running = "ON" if sched is not None and sched.is_running else "OFF"
    user = state.task_store.get_user(user_id) if user_id is not None else None
    return (
        "Status:\n"
        f"  Acting user: {user.username if user else '-'}\n"
        f"  Scheduler: {running}\n"
        f"  Overdue sweep every: {float(s.sweep_interval_seconds):.0f}s\n"
        f"  Summaries at: {s.summary_time.strftime('%H:%M')}, "
        f"reminders at: {s.reminder_time.strftime('%H:%M')}\n"
        f"  Users: {len(state.task_store.list_users())}, "
        f"projects: {len(state.task_store.list_projects())}, "
        f"tasks: {state.task_store.count_tasks()}"
    )


def cmd_as(state: AppState, args: list[str], user_id: int | None) -> str:
    """
    /as            -> show acting user
    /as <username> -> act as that user
    """
    if not args:
        if user_id is None:
            return "No acting user."
        user = state.task_store.get_user(user_id)
        return f"Acting as {user.username}." if user else "No acting user."

    user = state.task_store.get_user_by_username(args[0])
    if user is None:
        return f"Unknown user: {args[0]}"
    state.console_user_id = user.id
    return f"Acting as {user.username} ({user.role.value})."


def cmd_projects(state: AppState, args: list[str], user_id: int | None) -> str:
    """
    /projects               -> list visible projects
    /projects new <name...> -> create a project owned by the acting user
    """
    if user_id is None:
        return _NO_USER

    if args and args[0].lower() == "new":
        name = " ".join(args[1:]).strip()
        if not name:
            return "Usage: /projects new <name>"
        if not can(state.task_store.get_user(user_id), Action.CREATE_PROJECT):
            return "Not allowed."
        project = state.task_store.create_project(name=name, owner_id=user_id)
        return f"Project #{project.id} created: {project.name}"

    projects = list_user_projects(state, user_id)
    if not projects:
        return "No projects."
    return "\n".join(f"#{p.id} {p.name}" for p in projects)


def cmd_tasks(state: AppState, args: list[str], user_id: int | None) -> str:
    """
    /tasks              -> tasks assigned to the acting user
    /tasks <project_id> -> all tasks of a project
    """
    if user_id is None:
        return _NO_USER

    if args:
        try:
            project_id = int(args[0])
        except ValueError:
            return "Usage: /tasks [project_id]"
        tasks = list_project_tasks(state, user_id, project_id)
    else:
        tasks = state.task_store.list_tasks_for_user(user_id)

    if not tasks:
        return "No tasks."
    return "\n".join(_fmt_task(t) for t in tasks)


def cmd_add(state: AppState, args: list[str], user_id: int | None) -> str:
    """
    /add <project_id> <hours|-> <title...>

    Creates a task assigned to the acting user, due <hours> from now ("-" for no due date).
    """
    if user_id is None:
        return _NO_USER

    usage = "Usage: /add <project_id> <hours|-> <title>"
    if len(args) < 3:
        return usage
    try:
        project_id = int(args[0])
        due_at = None if args[1] == "-" else time.time() + float(args[1]) * 3600.0
    except ValueError:
        return usage

    project = state.task_store.get_project(project_id)
    user = state.task_store.get_user(user_id)
    members = state.task_store.list_member_ids(project_id)
    if project is None:
        return f"Unknown project: {project_id}"
    if not can(user, Action.EDIT_TASKS, project, member_ids=members):
        return "Not allowed."

    task = state.task_store.create_task(
        title=" ".join(args[2:]),
        project_id=project_id,
        due_at=due_at,
        assignee_id=user_id,
    )
    return f"Added {_fmt_task(task)}"


def cmd_move(state: AppState, args: list[str], user_id: int | None) -> str:
    """/move <task_id> <todo|inProgress|review|done>"""
    if user_id is None:
        return _NO_USER

    usage = "Usage: /move <task_id> <todo|inProgress|review|done>"
    if len(args) != 2:
        return usage
    try:
        task_id = int(args[0])
        status = TaskStatus(args[1])
    except ValueError:
        return usage
    if status == TaskStatus.OVERDUE:
        return "overdue is set by the deadline sweep, not by hand."

    task = state.task_store.get_task(task_id)
    if task is None:
        return f"Unknown task: {task_id}"
    project = state.task_store.get_project(task.project_id)
    user = state.task_store.get_user(user_id)
    members = state.task_store.list_member_ids(task.project_id)
    if not can(user, Action.EDIT_TASKS, project, member_ids=members):
        return "Not allowed."

    updated = state.task_store.update_task_fields(task_id, status=status)
    if updated is None:
        return f"Unknown task: {task_id}"
    return f"Moved {_fmt_task(updated)}"


def cmd_summary(state: AppState, args: list[str], user_id: int | None) -> str:
    if user_id is None:
        return _NO_USER

    summary = get_daily_summary(state, user_id)
    lines = [
        "Summary:",
        f"  To Do: {summary.todo}",
        f"  In Progress: {summary.in_progress}",
        f"  Review: {summary.review}",
        f"  Done: {summary.done}",
        f"  Overdue: {summary.overdue}",
        f"  Due soon: {summary.due_soon}",
        f"  Total: {summary.total}",
    ]
    alert = summary_alert(summary)
    if alert is not None:
        lines.append(f"{alert.title}: {alert.description}")
    return "\n".join(lines)


def cmd_reminders(state: AppState, args: list[str], user_id: int | None) -> str:
    if user_id is None:
        return _NO_USER

    hours = float(getattr(state.settings, "reminder_horizon_hours", 24.0))
    reminders = get_task_reminders(state, user_id)
    if not reminders:
        return f"Nothing due in the next {format_hours(hours)} hours."

    limit = int(getattr(state.settings, "reminder_toast_limit", 3))
    alerts = reminder_alerts(reminders, limit=limit, horizon_hours=hours)
    return "\n".join(f"{a.title}: {a.description}" for a in alerts)


def cmd_alerts(state: AppState, args: list[str], user_id: int | None) -> str:
    """Last alerts the notifier delivered to the acting user."""
    if user_id is None:
        return _NO_USER

    alerts_for = getattr(state.notifier, "alerts_for", None)
    alerts = alerts_for(user_id) if alerts_for is not None else []
    if not alerts:
        return "No alerts."
    return "\n".join(f"{a.title}: {a.description}" for a in alerts)


def cmd_sweep(
    state: AppState,
    args: list[str],
    user_id: int | None,
    emit: CommandEmitter | None = None,
) -> str:
    if user_id is None:
        return _NO_USER

    if emit:
        emit("[SWEEP] Checking for overdue tasks...")
    report = update_overdue(state, user_id)
    return (
        f"Overdue sweep: checked {report.processed}, "
        f"marked {report.changed} overdue, failures {report.failures}."
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show scheduler and store status.")
registry.register("as", cmd_as, help_text="Act as a user: /as <username>.")
registry.register(
    "projects", cmd_projects, help_text="List projects: /projects | /projects new <name>."
)
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks | /tasks <project_id>.")
registry.register("add", cmd_add, help_text="Add a task: /add <project_id> <hours|-> <title>.")
registry.register("move", cmd_move, help_text="Change task status: /move <task_id> <status>.")
registry.register("summary", cmd_summary, help_text="Daily summary for the acting user.")
registry.register(
    "reminders", cmd_reminders, help_text="Tasks due within the reminder window.", aliases=["due"]
)
registry.register("alerts", cmd_alerts, help_text="Show the last delivered alerts.")
registry.register("sweep", cmd_sweep, help_text="Run the overdue sweep now.")
