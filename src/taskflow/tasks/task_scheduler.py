# src/taskflow/tasks/task_scheduler.py

from __future__ import annotations

"""
Task scheduler.

A small recurring-job loop that:
- sweeps every task and flags the ones past their due date as overdue (hourly),
- sends per-user deadline reminders through an injected notifier (daily),
- sends per-user task summaries through the same notifier (daily).

Every unit of work (one task, one user) is isolated: a failure is logged and
counted in the job report, and the loop keeps going.

Rendering/delivery of reminders belongs to the notifier, not the scheduler.
"""

import asyncio
import contextlib
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from datetime import time as dtime

from ..core.ports import Notifier, TaskRepo, UserDirectory
from .deadlines import (
    DUE_SOON_HORIZON_SECONDS,
    REMINDER_HORIZON_SECONDS,
    classify,
    select_reminders,
    summarize,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JobReport:
    """Outcome of one job run."""

    job: str
    processed: int = 0
    changed: int = 0
    failures: int = 0

    @property
    def ok(self) -> bool:
        return self.failures == 0


# ---- jobs ----


def sweep_overdue(task_store: TaskRepo, now_ts: float, *, limit: int = 0) -> JobReport:
    """
    Flag every non-done task whose due date has passed as overdue.

    Only rows whose status actually changes are written. With limit > 0 at most
    `limit` rows are written per run; the rest are picked up by the next run.
    """
    report = JobReport(job="overdue_sweep")

    try:
        tasks = task_store.list_all_tasks()
    except Exception:
        logger.exception("list_all_tasks failed")
        report.failures += 1
        return report

    for task in tasks:
        if limit > 0 and report.changed >= limit:
            logger.info("Overdue sweep hit batch limit=%d; deferring the rest", limit)
            break

        report.processed += 1
        new_status = classify(task, now_ts)
        if new_status == task.status:
            continue

        try:
            # Only transition from the status we classified; a task moved to done
            # in the meantime must stay done.
            updated = task_store.update_task_status(task.id, new_status, expected=[task.status])
        except Exception:
            logger.exception("update_task_status(overdue) failed task_id=%s", task.id)
            report.failures += 1
            continue

        if updated is None:
            logger.warning("Task %s vanished during overdue sweep", task.id)
            report.failures += 1
            continue
        if updated.status != new_status:
            logger.debug("Task %s changed concurrently (now %s); skipped", task.id, updated.status.value)
            continue

        report.changed += 1
        logger.info("Task %s %s -> %s", task.id, task.status.value, new_status.value)

    logger.info(
        "Overdue sweep done: processed=%d changed=%d failures=%d",
        report.processed,
        report.changed,
        report.failures,
    )
    return report


async def dispatch_reminders(
        task_store: TaskRepo,
        users: UserDirectory,
        notifier: Notifier,
        now_ts: float,
        *,
        horizon_seconds: float = REMINDER_HORIZON_SECONDS,
        include_overdue: bool = True,
        include_done: bool = False,
) -> JobReport:
    """Send each user the tasks due within the reminder window (users with none are skipped)."""
    report = JobReport(job="reminders")

    try:
        all_users = users.list_users()
    except Exception:
        logger.exception("list_users failed")
        report.failures += 1
        return report

    for user in all_users:
        report.processed += 1
        try:
            tasks = task_store.list_tasks_for_user(user.id)
            upcoming = select_reminders(
                tasks,
                now_ts,
                horizon_seconds=horizon_seconds,
                include_overdue=include_overdue,
                include_done=include_done,
            )
            if not upcoming:
                continue

            await notifier.send_reminders(user=user, tasks=upcoming)
            report.changed += 1
            logger.info("Reminder sent user=%s upcoming=%d", user.username, len(upcoming))
        except Exception:
            logger.exception("reminder dispatch failed user_id=%s", user.id)
            report.failures += 1

    return report


async def dispatch_summaries(
        task_store: TaskRepo,
        users: UserDirectory,
        notifier: Notifier,
        now_ts: float,
        *,
        horizon_seconds: float = DUE_SOON_HORIZON_SECONDS,
) -> JobReport:
    """Send every user their per-status counts (including users with zero tasks)."""
    report = JobReport(job="summaries")

    try:
        all_users = users.list_users()
    except Exception:
        logger.exception("list_users failed")
        report.failures += 1
        return report

    for user in all_users:
        report.processed += 1
        try:
            tasks = task_store.list_tasks_for_user(user.id)
            summary = summarize(tasks, now_ts, horizon_seconds=horizon_seconds)
            await notifier.send_summary(user=user, summary=summary)
            report.changed += 1
            logger.info("Summary sent user=%s total=%d", user.username, summary.total)
        except Exception:
            logger.exception("summary dispatch failed user_id=%s", user.id)
            report.failures += 1

    return report


# ---- timing ----


def next_interval_fire(now_ts: float, interval_seconds: float) -> float:
    """Next multiple of interval_seconds strictly after now (3600 => top of the next hour)."""
    step = max(0.001, float(interval_seconds))
    return (now_ts // step + 1) * step


def next_daily_fire(now_ts: float, at: dtime) -> float:
    """Next local wall-clock occurrence of `at` strictly after now."""
    now = datetime.fromtimestamp(now_ts)
    candidate = now.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
    if candidate.timestamp() <= now_ts:
        candidate += timedelta(days=1)
    return candidate.timestamp()


# ---- scheduler ----


class TaskScheduler:
    """
    Owns the recurring jobs and their lifecycle.

    Either await `run(stop_event)` inside an existing event loop, or call
    `start()` to run it on a background thread with its own loop and
    `stop()` + `join()` to shut it down.

    Jobs run one after another inside a single loop, so they never overlap.
    Missed fire times are not replayed: after a job finishes, its next fire
    time is computed from the clock.
    """

    def __init__(
            self,
            task_store: TaskRepo,
            users: UserDirectory,
            notifier: Notifier,
            *,
            sweep_interval_seconds: float = 3600.0,
            sweep_batch_limit: int = 0,
            reminder_time: dtime = dtime(9, 0),
            summary_time: dtime = dtime(8, 0),
            reminder_horizon_seconds: float = REMINDER_HORIZON_SECONDS,
            due_soon_horizon_seconds: float = DUE_SOON_HORIZON_SECONDS,
            reminders_include_overdue: bool = True,
            reminders_include_done: bool = False,
            max_sleep_seconds: float = 60.0,
            clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = task_store
        self._users = users
        self._notifier = notifier

        self.sweep_interval_seconds = max(0.001, float(sweep_interval_seconds))
        self.sweep_batch_limit = max(0, int(sweep_batch_limit))
        self.reminder_time = reminder_time
        self.summary_time = summary_time
        self.reminder_horizon_seconds = float(reminder_horizon_seconds)
        self.due_soon_horizon_seconds = float(due_soon_horizon_seconds)
        self.reminders_include_overdue = bool(reminders_include_overdue)
        self.reminders_include_done = bool(reminders_include_done)
        self.max_sleep_seconds = max(0.001, float(max_sleep_seconds))
        self._clock = clock

        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event: asyncio.Event | None = None

    @classmethod
    def from_settings(
            cls,
            settings,
            task_store: TaskRepo,
            users: UserDirectory,
            notifier: Notifier,
    ) -> TaskScheduler:
        return cls(
            task_store,
            users,
            notifier,
            sweep_interval_seconds=settings.sweep_interval_seconds,
            sweep_batch_limit=settings.sweep_batch_limit,
            reminder_time=settings.reminder_time,
            summary_time=settings.summary_time,
            reminder_horizon_seconds=settings.reminder_horizon_hours * 3600.0,
            due_soon_horizon_seconds=settings.due_soon_horizon_hours * 3600.0,
            reminders_include_overdue=settings.reminders_include_overdue,
            reminders_include_done=settings.reminders_include_done,
        )

    # ---- job entry points ----

    def sweep(self, now_ts: float | None = None) -> JobReport:
        now_ts = self._clock() if now_ts is None else now_ts
        return sweep_overdue(self._store, now_ts, limit=self.sweep_batch_limit)

    async def send_reminders(self, now_ts: float | None = None) -> JobReport:
        now_ts = self._clock() if now_ts is None else now_ts
        return await dispatch_reminders(
            self._store,
            self._users,
            self._notifier,
            now_ts,
            horizon_seconds=self.reminder_horizon_seconds,
            include_overdue=self.reminders_include_overdue,
            include_done=self.reminders_include_done,
        )

    async def send_summaries(self, now_ts: float | None = None) -> JobReport:
        now_ts = self._clock() if now_ts is None else now_ts
        return await dispatch_summaries(
            self._store,
            self._users,
            self._notifier,
            now_ts,
            horizon_seconds=self.due_soon_horizon_seconds,
        )

    # ---- loop ----

    async def run(self, stop_event: asyncio.Event) -> None:
        """Run until stop_event is set (or the coroutine is cancelled)."""
        now_ts = self._clock()
        next_sweep = next_interval_fire(now_ts, self.sweep_interval_seconds)
        next_summary = next_daily_fire(now_ts, self.summary_time)
        next_reminders = next_daily_fire(now_ts, self.reminder_time)

        logger.info(
            "Task scheduler started (sweep every %.0fs, summaries at %s, reminders at %s)",
            self.sweep_interval_seconds,
            self.summary_time.strftime("%H:%M"),
            self.reminder_time.strftime("%H:%M"),
        )

        while not stop_event.is_set():
            now_ts = self._clock()

            if now_ts >= next_sweep:
                try:
                    self.sweep(now_ts)
                except Exception:
                    logger.exception("overdue sweep crashed")
                next_sweep = next_interval_fire(self._clock(), self.sweep_interval_seconds)

            if now_ts >= next_summary:
                try:
                    await self.send_summaries(now_ts)
                except Exception:
                    logger.exception("summary job crashed")
                next_summary = next_daily_fire(self._clock(), self.summary_time)

            if now_ts >= next_reminders:
                try:
                    await self.send_reminders(now_ts)
                except Exception:
                    logger.exception("reminder job crashed")
                next_reminders = next_daily_fire(self._clock(), self.reminder_time)

            wait_s = min(next_sweep, next_summary, next_reminders) - self._clock()
            wait_s = min(max(0.0, wait_s), self.max_sleep_seconds)
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(stop_event.wait(), timeout=wait_s)

        logger.info("Task scheduler stopped.")

    # ---- background thread lifecycle ----

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Start the loop in a background thread with its own event loop.

        Why a thread:
        - the console REPL is blocking (input()).
        - the scheduler is async and wants its own event loop.
        """
        if self.is_running:
            logger.warning("Task scheduler already running.")
            return

        ready = threading.Event()

        def runner() -> None:
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
            stop_event = asyncio.Event()

            self._loop = loop
            self._stop_event = stop_event
            ready.set()

            try:
                loop.run_until_complete(self.run(stop_event))
            except Exception:
                logger.exception("Task scheduler crashed.")
            finally:
                with contextlib.suppress(Exception):
                    loop.close()

        t = threading.Thread(target=runner, name="task-scheduler", daemon=True)
        self._thread = t
        t.start()

        if not ready.wait(timeout=5.0):
            logger.error("Task scheduler thread did not initialize properly.")
            return
        logger.info("Task scheduler background thread started.")

    def stop(self) -> None:
        loop, stop_event = self._loop, self._stop_event
        if loop is None or stop_event is None:
            return
        try:
            loop.call_soon_threadsafe(stop_event.set)
        except RuntimeError:
            # loop already closed
            logger.debug("Failed to signal scheduler stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

