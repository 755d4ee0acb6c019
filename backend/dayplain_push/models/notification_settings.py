from __future__ import annotations

from typing import Annotated

from pydantic import StringConstraints

from dayplain_push.models.base import CamelModel

# 24-hour "HH:MM"
TIME_OF_DAY_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"

TimeOfDay = Annotated[str, StringConstraints(pattern=TIME_OF_DAY_PATTERN)]


def to_minutes(value: str) -> int:
    """Minutes since midnight for an "HH:MM" string."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class NotificationSettings(CamelModel):
    """User-configured reminder policy."""

    reminder_time: TimeOfDay = "20:00"
    habit_reminders_enabled: bool = True
    task_reminders_enabled: bool = True
    quiet_hours_enabled: bool = False
    quiet_hours_start: TimeOfDay = "22:00"
    quiet_hours_end: TimeOfDay = "08:00"
