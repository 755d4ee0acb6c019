"""Periodic reminder jobs."""

from __future__ import annotations

from functools import partial

from dayplain_push.core.config import Settings
from dayplain_push.services.reminders import ReminderScheduler
from dayplain_push.tasks.ticker import Ticker


def build_reminder_ticker(scheduler: ReminderScheduler, settings: Settings) -> Ticker:
    """
    Jobs:
    - send-daily-habit-reminder: every minute, checks the +-1 minute window
    - cleanup-task-notifications: every 5 minutes, purges old dedup records

    Task due-soon checks are not scheduled here: the frontend posts its task
    list to /check-tasks on its own timer.
    """
    ticker = Ticker()
    ticker.add_job(
        "send-daily-habit-reminder",
        settings.REMINDER_CHECK_INTERVAL_SECONDS,
        # Never queue behind a slow evaluation; the next tick retries.
        partial(scheduler.run_daily_reminder_check, blocking=False),
        run_immediately=True,
    )
    ticker.add_job(
        "cleanup-task-notifications",
        settings.CLEANUP_INTERVAL_SECONDS,
        partial(scheduler.cleanup_task_notifications, blocking=False),
    )
    return ticker
