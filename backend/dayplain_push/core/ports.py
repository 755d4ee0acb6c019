"""
Ports used by the scheduler and the dispatcher.

The services depend on these Protocols rather than on the file-backed stores,
so tests can swap in in-memory versions and a fake push sender.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Protocol

from dayplain_push.models import NotificationSettings, NotificationState, PushSubscription


@dataclass(slots=True, frozen=True)
class SendOutcome:
    """Result of one delivery attempt to one endpoint."""

    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


class PushSender(Protocol):
    """Delivers one serialized payload to one subscription."""

    def send(self, subscription: PushSubscription, payload: str) -> SendOutcome: ...


class SubscriptionRepo(Protocol):
    def list(self) -> list[PushSubscription]: ...
    def count(self) -> int: ...
    def add(self, subscription: PushSubscription) -> bool: ...
    def remove(self, endpoint: str) -> bool: ...


class StateRepo(Protocol):
    def load(self) -> NotificationState: ...
    def save(self, state: NotificationState) -> None: ...
    def was_habit_reminder_sent(self, today: date) -> bool: ...
    def mark_habit_reminder_sent(self, today: date) -> None: ...
    def reset_habit_reminder(self) -> None: ...
    def was_task_notified(self, task_id: str) -> bool: ...
    def mark_task_notified(self, task_id: str, now: datetime) -> None: ...
    def purge_task_notifications(self, now: datetime, max_age: timedelta = ...) -> int: ...


class SettingsRepo(Protocol):
    def load(self) -> NotificationSettings: ...
    def update(self, updates: Mapping[str, Any]) -> NotificationSettings: ...
