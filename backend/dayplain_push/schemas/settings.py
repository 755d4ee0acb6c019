from __future__ import annotations

from typing import Optional

from dayplain_push.models.base import CamelModel
from dayplain_push.models.notification_settings import TimeOfDay


class NotificationSettingsUpdate(CamelModel):
    """Partial settings update. Omitted or null fields keep their value."""

    reminder_time: Optional[TimeOfDay] = None
    habit_reminders_enabled: Optional[bool] = None
    task_reminders_enabled: Optional[bool] = None
    quiet_hours_enabled: Optional[bool] = None
    quiet_hours_start: Optional[TimeOfDay] = None
    quiet_hours_end: Optional[TimeOfDay] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)
