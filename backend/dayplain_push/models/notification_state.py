from __future__ import annotations

from typing import Optional

from pydantic import Field

from dayplain_push.models.base import CamelModel


class NotificationState(CamelModel):
    """
    Deduplication bookkeeping for sent reminders.

    habit_reminder_last_sent is the ISO date ("YYYY-MM-DD") of the last daily
    reminder dispatch. task_notifications maps a task id to the epoch
    milliseconds of its due-soon notification.
    """

    habit_reminder_last_sent: Optional[str] = None
    task_notifications: dict[str, int] = Field(default_factory=dict)
