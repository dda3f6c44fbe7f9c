# src/taskflow/connectors/log_notifier.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..tasks.deadlines import (
    REMINDER_ALERT_LIMIT,
    REMINDER_HORIZON_SECONDS,
    Alert,
    TaskSummary,
    reminder_alerts,
    summary_alert,
)
from ..tasks.task_models import Task, User

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LogNotifier:
    """
    Notifier that "delivers" by logging the rendered alerts.

    Stands in for an e-mail/push channel: no delivery guarantee, nothing is retried.

    Per user it keeps the latest reminder alerts and the latest summary alert,
    each replaced by the next run of its job, so the console can show them on demand.
    """

    toast_limit: int = REMINDER_ALERT_LIMIT
    horizon_hours: float = REMINDER_HORIZON_SECONDS / 3600.0
    last_reminders: dict[int, list[Alert]] = field(default_factory=dict)
    last_summary: dict[int, Alert] = field(default_factory=dict)

    def alerts_for(self, user_id: int) -> list[Alert]:
        """Summary alert first (it is sent earlier in the day), then reminders."""
        out: list[Alert] = []
        summary = self.last_summary.get(user_id)
        if summary is not None:
            out.append(summary)
        out.extend(self.last_reminders.get(user_id, []))
        return out

    async def send_reminders(self, *, user: User, tasks: list[Task]) -> None:
        alerts = reminder_alerts(tasks, limit=self.toast_limit, horizon_hours=self.horizon_hours)
        self.last_reminders[user.id] = alerts
        for alert in alerts:
            logger.info("[%s] %s: %s", user.username, alert.title, alert.description)

    async def send_summary(self, *, user: User, summary: TaskSummary) -> None:
        logger.info(
            "[%s] Daily summary: todo=%d inProgress=%d review=%d done=%d overdue=%d dueSoon=%d total=%d",
            user.username,
            summary.todo,
            summary.in_progress,
            summary.review,
            summary.done,
            summary.overdue,
            summary.due_soon,
            summary.total,
        )
        alert = summary_alert(summary)
        if alert is None:
            self.last_summary.pop(user.id, None)
            return
        self.last_summary[user.id] = alert
        logger.info("[%s] %s: %s", user.username, alert.title, alert.description)
