# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from dataclasses import replace

from .task_models import (
    Membership,
    Project,
    Task,
    TaskPriority,
    TaskStatus,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

# bcrypt hash of "password" used by the sample accounts.
_SAMPLE_PASSWORD_HASH = "$2a$10$xVNkOIxUSGgGnNWr0GVEAu1ECKbKK9oR5xRJm0fQrXt5RgO47Rxdi"


class TaskStore:
    """
    In-memory store for users, projects, tasks and memberships.

    Every collection is a dict keyed by an incrementing integer id (starting at 1).
    Ids are never reused, even after deletes.

    Thread-safety:
    - one RLock guards every read and write, so the scheduler thread and the
      console/request thread never interleave inside a mutation
    - records are returned as copies; the only way to change stored state is
      through the update_* / delete_* methods
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

        self._users: dict[int, User] = {}
        self._projects: dict[int, Project] = {}
        self._tasks: dict[int, Task] = {}
        self._memberships: dict[int, Membership] = {}

        self._next_user_id = 1
        self._next_project_id = 1
        self._next_task_id = 1
        self._next_membership_id = 1

        logger.info("TaskStore ready (in-memory)")

    def close(self) -> None:
        """Compatibility hook for shutdown (nothing to release)."""
        return

    # ---- users ----

    def get_user(self, user_id: int) -> User | None:
        with self._lock:
            user = self._users.get(int(user_id))
            return replace(user) if user else None

    def get_user_by_username(self, username: str) -> User | None:
        if not username:
            return None
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return replace(user)
            return None

    def list_users(self) -> list[User]:
        with self._lock:
            return [replace(u) for u in self._users.values()]

    def create_user(
        self,
        *,
        username: str,
        password: str,
        email: str,
        name: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        if not username or not username.strip():
            raise ValueError("username is required")

        with self._lock:
            username = username.strip()
            if any(u.username == username for u in self._users.values()):
                raise ValueError(f"username already taken: {username}")

            user = User(
                id=self._next_user_id,
                username=username,
                password=password,
                email=email,
                name=name,
                role=UserRole(role),
            )
            self._users[user.id] = user
            self._next_user_id += 1
            logger.debug("User added id=%s username=%s role=%s", user.id, username, user.role.value)
            return replace(user)

    def update_user(
        self,
        user_id: int,
        *,
        email: str | None = None,
        name: str | None = None,
        password: str | None = None,
        role: UserRole | None = None,
    ) -> User | None:
        with self._lock:
            user = self._users.get(int(user_id))
            if user is None:
                return None

            if email is not None:
                user.email = email
            if name is not None:
                user.name = name
            if password is not None:
                user.password = password
            if role is not None:
                user.role = UserRole(role)
            return replace(user)

    # ---- projects ----

    def get_project(self, project_id: int) -> Project | None:
        with self._lock:
            project = self._projects.get(int(project_id))
            return replace(project) if project else None

    def list_projects(self) -> list[Project]:
        with self._lock:
            return [replace(p) for p in self._projects.values()]

    def list_user_projects(self, user_id: int) -> list[Project]:
        """
        Projects visible to a user: the ones they own plus the ones they are a member of.

        Each project appears once, in id order.
        """
        user_id = int(user_id)
        with self._lock:
            member_of = {m.project_id for m in self._memberships.values() if m.user_id == user_id}
            return [
                replace(p)
                for p in self._projects.values()
                if p.owner_id == user_id or p.id in member_of
            ]

    def create_project(
        self,
        *,
        name: str,
        owner_id: int,
        description: str | None = None,
        deadline: float | None = None,
    ) -> Project:
        if not name or not name.strip():
            raise ValueError("name is required")

        with self._lock:
            project = Project(
                id=self._next_project_id,
                name=name.strip(),
                owner_id=int(owner_id),
                description=description,
                deadline=float(deadline) if deadline is not None else None,
            )
            self._projects[project.id] = project
            self._next_project_id += 1
            logger.debug("Project added id=%s owner=%s", project.id, project.owner_id)
            return replace(project)

    def update_project(
        self,
        project_id: int,
        *,
        name: str | None = None,
        description: str | None = None,
        deadline: float | None = None,
        owner_id: int | None = None,
    ) -> Project | None:
        with self._lock:
            project = self._projects.get(int(project_id))
            if project is None:
                return None

            if name is not None:
                if not name.strip():
                    raise ValueError("name must not be empty")
                project.name = name.strip()
            if description is not None:
                project.description = description
            if deadline is not None:
                project.deadline = float(deadline)
            if owner_id is not None:
                project.owner_id = int(owner_id)
            return replace(project)

    def delete_project(self, project_id: int) -> bool:
        """Delete a project together with its tasks and memberships."""
        project_id = int(project_id)
        with self._lock:
            if self._projects.pop(project_id, None) is None:
                return False

            task_ids = [t.id for t in self._tasks.values() if t.project_id == project_id]
            for tid in task_ids:
                del self._tasks[tid]

            membership_ids = [m.id for m in self._memberships.values() if m.project_id == project_id]
            for mid in membership_ids:
                del self._memberships[mid]

            logger.info(
                "Project %s deleted (tasks=%d memberships=%d)",
                project_id,
                len(task_ids),
                len(membership_ids),
            )
            return True

    # ---- memberships ----

    def add_member(self, *, project_id: int, user_id: int) -> Membership:
        with self._lock:
            if int(project_id) not in self._projects:
                raise ValueError(f"unknown project_id: {project_id}")

            for m in self._memberships.values():
                if m.project_id == int(project_id) and m.user_id == int(user_id):
                    return replace(m)

            membership = Membership(
                id=self._next_membership_id,
                project_id=int(project_id),
                user_id=int(user_id),
            )
            self._memberships[membership.id] = membership
            self._next_membership_id += 1
            return replace(membership)

    def list_project_members(self, project_id: int) -> list[User]:
        with self._lock:
            member_ids = {m.user_id for m in self._memberships.values() if m.project_id == int(project_id)}
            return [replace(u) for u in self._users.values() if u.id in member_ids]

    def list_member_ids(self, project_id: int) -> set[int]:
        with self._lock:
            return {m.user_id for m in self._memberships.values() if m.project_id == int(project_id)}

    def remove_member(self, project_id: int, user_id: int) -> bool:
        with self._lock:
            for m in list(self._memberships.values()):
                if m.project_id == int(project_id) and m.user_id == int(user_id):
                    del self._memberships[m.id]
                    return True
            return False

    # ---- tasks ----

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def get_task(self, task_id: int) -> Task | None:
        with self._lock:
            task = self._tasks.get(int(task_id))
            return replace(task) if task else None

    def list_all_tasks(self) -> list[Task]:
        with self._lock:
            return [replace(t) for t in self._tasks.values()]

    def list_project_tasks(self, project_id: int) -> list[Task]:
        with self._lock:
            return [replace(t) for t in self._tasks.values() if t.project_id == int(project_id)]

    def list_tasks_for_user(self, user_id: int) -> list[Task]:
        """Tasks assigned to the given user."""
        with self._lock:
            return [replace(t) for t in self._tasks.values() if t.assignee_id == int(user_id)]

    def list_tasks_by_status(self, project_id: int, status: TaskStatus) -> list[Task]:
        with self._lock:
            return [
                replace(t)
                for t in self._tasks.values()
                if t.project_id == int(project_id) and t.status == status
            ]

    def create_task(
        self,
        *,
        title: str,
        project_id: int,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        status: TaskStatus = TaskStatus.TODO,
        due_at: float | None = None,
        assignee_id: int | None = None,
        created_at: float | None = None,
    ) -> Task:
        if not title or not title.strip():
            raise ValueError("title is required")
        if status == TaskStatus.OVERDUE:
            raise ValueError("overdue is derived from due_at; use update_task_status")

        with self._lock:
            if int(project_id) not in self._projects:
                raise ValueError(f"unknown project_id: {project_id}")

            task = Task(
                id=self._next_task_id,
                title=title.strip(),
                project_id=int(project_id),
                created_at=time.time() if created_at is None else float(created_at),
                status=TaskStatus(status),
                priority=TaskPriority(priority),
                description=description,
                due_at=float(due_at) if due_at is not None else None,
                assignee_id=int(assignee_id) if assignee_id is not None else None,
            )
            self._tasks[task.id] = task
            self._next_task_id += 1
            logger.debug(
                "Task added id=%s project=%s status=%s due_at=%s",
                task.id,
                task.project_id,
                task.status.value,
                task.due_at,
            )
            return replace(task)

    def update_task_fields(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: TaskPriority | None = None,
        status: TaskStatus | None = None,
        due_at: float | None = None,
        assignee_id: int | None = None,
        project_id: int | None = None,
    ) -> Task | None:
        """
        Update the given fields of a task (None means "leave unchanged").

        Status "overdue" is rejected here; only the deadline sweep sets it,
        through update_task_status.

        Returns the updated task, or None if the task does not exist.
        """
        with self._lock:
            task = self._tasks.get(int(task_id))
            if task is None:
                return None

            if project_id is not None and int(project_id) not in self._projects:
                raise ValueError(f"unknown project_id: {project_id}")
            if title is not None and not title.strip():
                raise ValueError("title must not be empty")
            if status == TaskStatus.OVERDUE:
                raise ValueError("overdue is derived from due_at; use update_task_status")

            if title is not None:
                task.title = title.strip()
            if description is not None:
                task.description = description
            if priority is not None:
                task.priority = TaskPriority(priority)
            if status is not None:
                task.status = TaskStatus(status)
            if due_at is not None:
                task.due_at = float(due_at)
            if assignee_id is not None:
                task.assignee_id = int(assignee_id)
            if project_id is not None:
                task.project_id = int(project_id)
            return replace(task)

    def update_task_status(
        self,
        task_id: int,
        new_status: TaskStatus,
        *,
        expected: Iterable[TaskStatus] | None = None,
    ) -> Task | None:
        """
        Set a task's status, optionally only if it is currently in `expected`.

        Atomically transitions:
          status IN expected  -> status = new_status

        Returns None if the task does not exist. If the current status is not
        in `expected`, nothing is written and the task is returned unchanged.
        """
        with self._lock:
            task = self._tasks.get(int(task_id))
            if task is None:
                return None
            if expected is not None and task.status not in set(expected):
                return replace(task)
            task.status = TaskStatus(new_status)
            return replace(task)

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            return self._tasks.pop(int(task_id), None) is not None

    # ---- sample data ----

    def seed_sample_data(self) -> None:
        """Create the demo accounts (admin + one regular user) if they are missing."""
        if self.get_user_by_username("admin") is None:
            self.create_user(
                username="admin",
                password=_SAMPLE_PASSWORD_HASH,
                email="admin@taskflow.com",
                name="Admin User",
                role=UserRole.ADMIN,
            )
        if self.get_user_by_username("alexmorgan") is None:
            self.create_user(
                username="alexmorgan",
                password=_SAMPLE_PASSWORD_HASH,
                email="alex@example.com",
                name="Alex Morgan",
                role=UserRole.USER,
            )
        logger.info("Sample data seeded (users=%d)", len(self.list_users()))
