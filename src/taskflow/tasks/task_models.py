# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - "overdue" is derived from due_at by the deadline sweep; it is never a
      terminal state and done tasks are never moved into it.
    - values match the wire format used by the board/list views (camelCase).
    """

    TODO = "todo"
    IN_PROGRESS = "inProgress"
    REVIEW = "review"
    DONE = "done"
    OVERDUE = "overdue"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(raw)
        except ValueError:
            return cls.TODO


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def from_raw(cls, raw: str | None) -> UserRole:
        if not raw:
            return cls.USER
        try:
            return cls(raw)
        except ValueError:
            return cls.USER


@dataclass(slots=True)
class User:
    id: int
    username: str
    password: str  # opaque credential (hash), never checked here
    email: str
    name: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(slots=True)
class Project:
    id: int
    name: str
    owner_id: int
    description: str | None = None
    deadline: float | None = None


@dataclass(slots=True)
class Membership:
    id: int
    project_id: int
    user_id: int


@dataclass(slots=True)
class Task:
    id: int
    title: str
    project_id: int
    created_at: float

    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM

    description: str | None = None
    due_at: float | None = None
    assignee_id: int | None = None
