# tests/conftest.py

from __future__ import annotations

from datetime import time as dtime
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.core.state import AppState
from taskflow.tasks.task_models import User, UserRole
from taskflow.tasks.task_store import TaskStore

from .fakes import RecordingNotifier

NOW = 1_700_000_000.0
HOUR = 3600.0


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the query/command layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        console_enabled=False,
        scheduler_enabled=False,
        seed_sample_data=True,
        sweep_interval_seconds=3600.0,
        sweep_batch_limit=0,
        reminder_time=dtime(9, 0),
        summary_time=dtime(8, 0),
        reminder_horizon_hours=24.0,
        due_soon_horizon_hours=48.0,
        reminders_include_overdue=True,
        reminders_include_done=False,
        reminder_toast_limit=3,
    )


@pytest.fixture()
def store() -> TaskStore:
    """Store with the two sample accounts (admin id=1, alexmorgan id=2)."""
    s = TaskStore()
    s.seed_sample_data()
    return s


@pytest.fixture()
def admin(store: TaskStore) -> User:
    user = store.get_user_by_username("admin")
    assert user is not None and user.role == UserRole.ADMIN
    return user


@pytest.fixture()
def alex(store: TaskStore) -> User:
    user = store.get_user_by_username("alexmorgan")
    assert user is not None
    return user


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """AppState wired with the real in-memory store and a recording notifier."""
    return AppState(
        settings=settings,
        task_store=store,
        notifier=RecordingNotifier(),
    )
