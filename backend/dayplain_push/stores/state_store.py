"""Persisted deduplication state for sent reminders."""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime, timedelta
from pathlib import Path

from pydantic import ValidationError

from dayplain_push.core.exceptions import StorageReadError
from dayplain_push.models import NotificationState
from dayplain_push.stores.json_file import JsonFileStore

logger = logging.getLogger(__name__)

TASK_NOTIFICATION_MAX_AGE = timedelta(days=7)


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class StateStore:
    """
    File-backed NotificationState.

    Reads never fail: a missing or corrupt file yields empty state.
    Writes raise StorageWriteError, since a lost write means duplicate sends.
    """

    def __init__(self, path: Path) -> None:
        self._file = JsonFileStore(path)
        self._lock = threading.RLock()

    def load(self) -> NotificationState:
        try:
            data = self._file.read()
        except StorageReadError as e:
            logger.error(f"Error loading notification state: {e}")
            return NotificationState()

        if data is None:
            return NotificationState()
        if not isinstance(data, dict):
            logger.error(f"Error loading notification state: expected an object in {self._file.path}")
            return NotificationState()

        try:
            return NotificationState.model_validate({**NotificationState().to_document(), **data})
        except ValidationError as e:
            logger.error(f"Error loading notification state: {e}")
            return NotificationState()

    def save(self, state: NotificationState) -> None:
        with self._lock:
            self._file.write(state.to_document())

    # Daily habit reminder

    def was_habit_reminder_sent(self, today: date) -> bool:
        return self.load().habit_reminder_last_sent == today.isoformat()

    def mark_habit_reminder_sent(self, today: date) -> None:
        with self._lock:
            state = self.load()
            state.habit_reminder_last_sent = today.isoformat()
            self.save(state)

    def reset_habit_reminder(self) -> None:
        with self._lock:
            state = self.load()
            if state.habit_reminder_last_sent is None:
                return
            state.habit_reminder_last_sent = None
            self.save(state)

    # Task due-soon reminders

    def was_task_notified(self, task_id: str) -> bool:
        return bool(self.load().task_notifications.get(task_id))

    def mark_task_notified(self, task_id: str, now: datetime) -> None:
        with self._lock:
            state = self.load()
            state.task_notifications[task_id] = to_epoch_ms(now)
            self.save(state)

    def purge_task_notifications(
        self,
        now: datetime,
        max_age: timedelta = TASK_NOTIFICATION_MAX_AGE,
    ) -> int:
        """Drop task markers older than max_age. Returns the number removed."""
        cutoff = to_epoch_ms(now - max_age)
        with self._lock:
            state = self.load()
            kept = {
                task_id: sent_at
                for task_id, sent_at in state.task_notifications.items()
                if sent_at > cutoff
            }
            removed = len(state.task_notifications) - len(kept)
            if removed:
                state.task_notifications = kept
                self.save(state)
            return removed
