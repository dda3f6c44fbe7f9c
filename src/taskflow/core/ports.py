# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler and the query layer depend on Protocols instead of concrete implementations.
This keeps storage/notification channels swappable and makes testing easier.
"""

from typing import Any, Awaitable, Iterable, Protocol


class TaskRepo(Protocol):
    # Deadline sweep / per-user views
    def list_all_tasks(self) -> list[Any]: ...
    def list_tasks_for_user(self, user_id: int) -> list[Any]: ...
    def update_task_status(
            self,
            task_id: int,
            new_status: Any,
            *,
            expected: Iterable[Any] | None = None,
    ) -> Any | None: ...

    def update_task_fields(
            self,
            task_id: int,
            *,
            title: str | None = None,
            description: str | None = None,
            priority: Any | None = None,
            status: Any | None = None,  # TaskStatus (kept as Any to avoid import coupling)
            due_at: float | None = None,
            assignee_id: int | None = None,
            project_id: int | None = None,
    ) -> Any | None: ...


class UserDirectory(Protocol):
    def list_users(self) -> list[Any]: ...


class Notifier(Protocol):
    """
    Delivery-side port: how the scheduler hands reminders/summaries outward.

    The notifier decides how to render and deliver (log line, e-mail, push, toast...).
    There is no delivery guarantee: a failed send is logged by the scheduler and dropped.
    """

    def send_reminders(self, *, user: Any, tasks: list[Any]) -> Awaitable[None]: ...

    def send_summary(self, *, user: Any, summary: Any) -> Awaitable[None]: ...
