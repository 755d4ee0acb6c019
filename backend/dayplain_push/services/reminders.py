"""
Reminder scheduling.

Two independent tracks share one evaluation lock:

- the daily habit reminder, evaluated by the ticker every minute and sent at
  most once per calendar day within +-1 minute of the configured time;
- task due-soon reminders, evaluated whenever the frontend submits its task
  list and sent at most once per task id until the 7-day purge.

The dedup marker is always written after the dispatch call has returned.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional
from zoneinfo import ZoneInfo

from dayplain_push.core.ports import SettingsRepo, StateRepo, SubscriptionRepo
from dayplain_push.models import NotificationSettings
from dayplain_push.models.notification_settings import to_minutes
from dayplain_push.schemas import NotificationPayload, Task
from dayplain_push.services.due_soon import filter_notifiable, minutes_until_due
from dayplain_push.services.web_push import NotificationDispatcher
from dayplain_push.stores.state_store import TASK_NOTIFICATION_MAX_AGE

logger = logging.getLogger(__name__)

REMINDER_TOLERANCE_MINUTES = 1

Clock = Callable[[], datetime]


def local_clock(timezone_name: Optional[str] = None) -> Clock:
    """Aware wall clock in the given IANA zone, or in the process local zone."""
    if timezone_name:
        zone = ZoneInfo(timezone_name)
        return lambda: datetime.now(zone)
    return lambda: datetime.now().astimezone()


def is_within_reminder_window(
    current: str,
    target: str,
    tolerance_minutes: int = REMINDER_TOLERANCE_MINUTES,
) -> bool:
    """
    "HH:MM" current time is within tolerance of target.

    The window does not wrap past midnight: the calendar date changes there,
    and wrapping would let one reminder fire on two days.
    """
    return abs(to_minutes(current) - to_minutes(target)) <= tolerance_minutes


def is_in_quiet_hours(current: str, start: str, end: str) -> bool:
    """Quiet hours are [start, end); start > end spans midnight."""
    now_m, start_m, end_m = to_minutes(current), to_minutes(start), to_minutes(end)
    if start_m > end_m:
        return now_m >= start_m or now_m < end_m
    return start_m <= now_m < end_m


def habit_reminder_payload() -> NotificationPayload:
    return NotificationPayload(
        title="Daily Check-in",
        body="A quick check-in: you still have habits left today.",
        tag="habit-reminder",
        data={"type": "habit-reminder"},
    )


def task_reminder_payload(task: Task, minutes: int) -> NotificationPayload:
    return NotificationPayload(
        title="Task Due Soon",
        body=f'Task "{task.title}" is due in {minutes} minutes.',
        tag=f"task-{task.id}",
        data={"type": "task-reminder", "taskId": task.id},
    )


class ReminderScheduler:
    """Decides when reminders go out and records that they did."""

    def __init__(
        self,
        settings_store: SettingsRepo,
        state_store: StateRepo,
        registry: SubscriptionRepo,
        dispatcher: NotificationDispatcher,
        clock: Optional[Clock] = None,
    ) -> None:
        self.settings_store = settings_store
        self.state_store = state_store
        self.registry = registry
        self.dispatcher = dispatcher
        self.clock = clock or local_clock()
        self._lock = threading.Lock()

    def now(self) -> datetime:
        return self.clock()

    @contextmanager
    def _evaluation(self, name: str, blocking: bool) -> Iterator[bool]:
        """Hold the evaluation lock. Yields False if busy and not blocking."""
        acquired = self._lock.acquire(blocking=blocking)
        if not acquired:
            logger.warning(f"Skipping {name}: previous evaluation still running")
        try:
            yield acquired
        finally:
            if acquired:
                self._lock.release()

    def update_settings(self, changes: Mapping[str, Any]) -> NotificationSettings:
        """
        Apply a settings change under the evaluation lock.

        A reminder time change clears today's marker; doing that while a daily
        dispatch is in flight would let the dispatch re-mark the day afterwards.
        """
        with self._evaluation("settings update", blocking=True):
            return self.settings_store.update(changes)

    # Daily habit reminder

    def run_daily_reminder_check(
        self,
        now: Optional[datetime] = None,
        *,
        blocking: bool = True,
    ) -> bool:
        """Evaluate the daily reminder once. Returns True if it was dispatched."""
        with self._evaluation("daily reminder check", blocking) as acquired:
            if not acquired:
                return False
            now = now or self.now()
            settings = self.settings_store.load()

            if not settings.habit_reminders_enabled:
                return False

            current = now.strftime("%H:%M")
            if not is_within_reminder_window(current, settings.reminder_time):
                return False

            if settings.quiet_hours_enabled and is_in_quiet_hours(
                current, settings.quiet_hours_start, settings.quiet_hours_end
            ):
                logger.info("Quiet hours - skipping habit reminder")
                return False

            logger.info("Running daily habit reminder...")
            return self._send_habit_reminder(now.date())

    def _send_habit_reminder(self, today: date) -> bool:
        if self.state_store.was_habit_reminder_sent(today):
            logger.debug("Habit reminder already sent today")
            return False

        # No subscribers: leave the day unmarked so a later subscriber
        # still gets today's reminder inside the window.
        if self.registry.count() == 0:
            logger.info("No subscribers for habit reminder")
            return False

        result = self.dispatcher.dispatch(habit_reminder_payload())
        if result.total == 0:
            logger.info("Subscribers disappeared before habit reminder dispatch")
            return False

        self.state_store.mark_habit_reminder_sent(today)
        logger.info(f"Habit reminder sent for {today.isoformat()}: {result.success}/{result.total}")
        return True

    # Task due-soon reminders

    def check_tasks(self, tasks: Iterable[Task], now: Optional[datetime] = None) -> int:
        """Send due-soon reminders for the submitted tasks. Returns tasks notified."""
        with self._evaluation("task check", blocking=True):
            now = now or self.now()
            settings = self.settings_store.load()
            if not settings.task_reminders_enabled:
                logger.info("Task reminders disabled - skipping task check")
                return 0

            sent = 0
            seen: set[str] = set()
            for task in filter_notifiable(tasks, now):
                if task.id in seen:
                    continue
                seen.add(task.id)

                if self.state_store.was_task_notified(task.id):
                    continue

                payload = task_reminder_payload(task, minutes_until_due(task, now))
                self.dispatcher.dispatch(payload)
                self.state_store.mark_task_notified(task.id, now)
                sent += 1
                logger.info(f"Task reminder sent for task {task.id}")

            return sent

    def cleanup_task_notifications(
        self,
        now: Optional[datetime] = None,
        *,
        blocking: bool = True,
    ) -> int:
        """Purge task markers older than seven days. Returns markers removed."""
        with self._evaluation("task notification cleanup", blocking) as acquired:
            if not acquired:
                return 0
            now = now or self.now()
            removed = self.state_store.purge_task_notifications(now, TASK_NOTIFICATION_MAX_AGE)
            if removed:
                logger.info(f"Removed {removed} task notification record(s) older than 7 days")
            return removed
