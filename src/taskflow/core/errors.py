# src/taskflow/core/errors.py

from __future__ import annotations


class TaskFlowError(Exception):
    """Base class for errors raised by the query layer."""


class NotFoundError(TaskFlowError):
    def __init__(self, kind: str, ident: int | str) -> None:
        super().__init__(f"{kind} not found: {ident}")
        self.kind = kind
        self.ident = ident


class PermissionDeniedError(TaskFlowError):
    def __init__(self, user_id: int | None, action: str) -> None:
        super().__init__(f"user {user_id} is not allowed to {action}")
        self.user_id = user_id
        self.action = action
