from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional

from dayplain_push.schemas import Task, TaskPriority, TaskStatus

# Fixed policy, not user-configurable
DUE_SOON_WINDOW = timedelta(minutes=30)
NOTIFIABLE_PRIORITIES = frozenset({TaskPriority.HIGH, TaskPriority.CRITICAL})


def due_at(task: Task, now: datetime) -> Optional[datetime]:
    """Task due time as an aware datetime. Naive values are read in now's timezone."""
    if task.due_date is None:
        return None
    if task.due_date.tzinfo is None:
        return task.due_date.replace(tzinfo=now.tzinfo)
    return task.due_date


def time_until_due(task: Task, now: datetime) -> Optional[timedelta]:
    due = due_at(task, now)
    if due is None:
        return None
    return due - now


def minutes_until_due(task: Task, now: datetime) -> int:
    remaining = time_until_due(task, now)
    if remaining is None:
        return 0
    # Math.round semantics: halves round up
    return int(remaining.total_seconds() / 60 + 0.5)


def is_notifiable(task: Task, now: datetime) -> bool:
    """
    High/Critical, not completed, with a due date strictly in the future and
    at most DUE_SOON_WINDOW away. Overdue tasks are not "coming due".
    """
    if task.priority not in NOTIFIABLE_PRIORITIES:
        return False
    if task.status == TaskStatus.COMPLETED:
        return False
    remaining = time_until_due(task, now)
    if remaining is None:
        return False
    return timedelta(0) < remaining <= DUE_SOON_WINDOW


def filter_notifiable(tasks: Iterable[Task], now: datetime) -> list[Task]:
    return [task for task in tasks if is_notifiable(task, now)]
