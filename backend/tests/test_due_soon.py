# backend/tests/test_due_soon.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from dayplain_push.schemas import Task
from dayplain_push.services.due_soon import filter_notifiable, is_notifiable, minutes_until_due

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


def task(due: object = None, **fields) -> Task:
    data = {"id": "t1", "title": "Ship it", "priority": "High", "status": "Planned", "dueDate": due}
    data.update(fields)
    return Task.model_validate(data)


def due_in(**kwargs: float) -> str:
    return (NOW + timedelta(**kwargs)).isoformat()


def test_due_in_exactly_thirty_minutes_is_notifiable() -> None:
    assert is_notifiable(task(due_in(minutes=30)), NOW)


def test_due_just_past_the_window_is_not_notifiable() -> None:
    assert not is_notifiable(task(due_in(minutes=30, seconds=1)), NOW)


@pytest.mark.parametrize("minutes", [0, -1, -120])
def test_due_now_or_overdue_is_not_notifiable(minutes: int) -> None:
    assert not is_notifiable(task(due_in(minutes=minutes)), NOW)


def test_one_second_before_due_is_notifiable() -> None:
    assert is_notifiable(task(due_in(seconds=1)), NOW)


@pytest.mark.parametrize(("priority", "expected"), [("Low", False), ("Medium", False), ("High", True), ("Critical", True)])
def test_only_high_and_critical_priorities(priority: str, expected: bool) -> None:
    assert is_notifiable(task(due_in(minutes=10), priority=priority), NOW) is expected


@pytest.mark.parametrize(("status", "expected"), [("Backlog", True), ("Planned", True), ("InProgress", True), ("Completed", False)])
def test_completed_tasks_are_skipped(status: str, expected: bool) -> None:
    assert is_notifiable(task(due_in(minutes=10), status=status), NOW) is expected


@pytest.mark.parametrize("due", [None, ""])
def test_tasks_without_due_date_are_skipped(due) -> None:
    assert not is_notifiable(task(due), NOW)


def test_naive_due_date_uses_reference_timezone() -> None:
    naive = (NOW + timedelta(minutes=15)).replace(tzinfo=None).isoformat()
    assert is_notifiable(task(naive), NOW)


def test_due_date_in_other_offset() -> None:
    plus_two = timezone(timedelta(hours=2))
    due = (NOW + timedelta(minutes=15)).astimezone(plus_two).isoformat()
    assert is_notifiable(task(due), NOW)


def test_filter_keeps_only_candidates() -> None:
    tasks = [
        task(due_in(minutes=5), id="a"),
        task(due_in(minutes=50), id="b"),
        task(due_in(minutes=5), id="c", priority="Low"),
        task(due_in(minutes=29), id="d", priority="Critical"),
    ]
    assert sorted(t.id for t in filter_notifiable(tasks, NOW)) == ["a", "d"]


def test_minutes_until_due_rounds() -> None:
    assert minutes_until_due(task(due_in(minutes=19, seconds=31)), NOW) == 20
    assert minutes_until_due(task(due_in(minutes=19, seconds=29)), NOW) == 19


def test_numeric_task_ids_are_accepted() -> None:
    assert task(due_in(minutes=5), id=42).id == "42"
