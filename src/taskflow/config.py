# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Every scheduler cadence/horizon is a setting, not a constant baked into the jobs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import time as dtime
from pathlib import Path

ENV_PREFIX = "TASKFLOW"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_time(name: str, default: dtime) -> dtime:
    """Parse "HH:MM" (24h clock). Falls back to default on bad input."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        hh, mm = raw.strip().split(":", 1)
        return dtime(hour=int(hh), minute=int(mm))
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Switches ----
    console_enabled: bool
    scheduler_enabled: bool
    seed_sample_data: bool

    # ---- Scheduler cadence ----
    sweep_interval_seconds: float
    sweep_batch_limit: int
    reminder_time: dtime
    summary_time: dtime

    # ---- Deadline windows ----
    reminder_horizon_hours: float
    due_soon_horizon_hours: float
    reminders_include_overdue: bool
    reminders_include_done: bool
    reminder_toast_limit: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskflow") or "taskflow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        scheduler_enabled = _env_bool(_k("SCHEDULER_ENABLED"), True)
        seed_sample_data = _env_bool(_k("SEED_SAMPLE_DATA"), True)

        # Overdue sweep runs at the top of every hour by default.
        sweep_interval_seconds = _env_float(_k("SWEEP_INTERVAL_SECONDS"), 3600.0)
        # 0 => no cap
        sweep_batch_limit = _env_int(_k("SWEEP_BATCH_LIMIT"), 0)
        reminder_time = _env_time(_k("REMINDER_TIME"), dtime(9, 0))
        summary_time = _env_time(_k("SUMMARY_TIME"), dtime(8, 0))

        reminder_horizon_hours = _env_float(_k("REMINDER_HORIZON_HOURS"), 24.0)
        due_soon_horizon_hours = _env_float(_k("DUE_SOON_HORIZON_HOURS"), 48.0)
        reminders_include_overdue = _env_bool(_k("REMINDERS_INCLUDE_OVERDUE"), True)
        reminders_include_done = _env_bool(_k("REMINDERS_INCLUDE_DONE"), False)
        reminder_toast_limit = _env_int(_k("REMINDER_TOAST_LIMIT"), 3)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            scheduler_enabled=scheduler_enabled,
            seed_sample_data=seed_sample_data,
            sweep_interval_seconds=sweep_interval_seconds,
            sweep_batch_limit=sweep_batch_limit,
            reminder_time=reminder_time,
            summary_time=summary_time,
            reminder_horizon_hours=reminder_horizon_hours,
            due_soon_horizon_hours=due_soon_horizon_hours,
            reminders_include_overdue=reminders_include_overdue,
            reminders_include_done=reminders_include_done,
            reminder_toast_limit=reminder_toast_limit,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env; use config_local.py only for switches.
try:
    import config_local as _config_local  # type: ignore

    if hasattr(_config_local, "CONSOLE_ENABLED"):
        object.__setattr__(SETTINGS, "console_enabled", bool(_config_local.CONSOLE_ENABLED))  # type: ignore[misc]
    if hasattr(_config_local, "SCHEDULER_ENABLED"):
        object.__setattr__(SETTINGS, "scheduler_enabled", bool(_config_local.SCHEDULER_ENABLED))  # type: ignore[misc]
    if hasattr(_config_local, "SEED_SAMPLE_DATA"):
        object.__setattr__(SETTINGS, "seed_sample_data", bool(_config_local.SEED_SAMPLE_DATA))  # type: ignore[misc]
except ImportError:
    pass


def get_settings() -> Settings:
    return SETTINGS
