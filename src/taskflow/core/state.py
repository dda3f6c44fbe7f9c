# src/taskflow/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..tasks.task_store import TaskStore
from .ports import Notifier

if TYPE_CHECKING:
    from ..tasks.task_scheduler import TaskScheduler


@dataclass
class AppState:
    """
    Shared application state (composition root output).

    Settings are stored as `Any` so tests can use a lightweight SimpleNamespace.
    """

    settings: Any

    task_store: TaskStore
    notifier: Notifier

    scheduler: TaskScheduler | None = None

    # Acting user for console commands (switched with /as).
    console_user_id: int | None = None

    # Serializes console commands; the store has its own lock for data access.
    lock: threading.RLock = field(default_factory=threading.RLock)
