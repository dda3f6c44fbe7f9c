# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (store/notifier/scheduler).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.log_notifier import LogNotifier
from ..core.state import AppState
from ..tasks.task_scheduler import TaskScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().

    The scheduler is built but not started; the entry point owns its lifecycle.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore()
    if settings.seed_sample_data:
        store.seed_sample_data()

    notifier = LogNotifier(
        toast_limit=settings.reminder_toast_limit,
        horizon_hours=settings.reminder_horizon_hours,
    )

    state = AppState(
        settings=settings,
        task_store=store,
        notifier=notifier,
    )
    if settings.scheduler_enabled:
        state.scheduler = TaskScheduler.from_settings(settings, store, store, notifier)
    return state
