# backend/tests/test_api.py

from __future__ import annotations

from datetime import timedelta

import pytest

from dayplain_push.core.config import Settings
from dayplain_push.core.exceptions import ConfigurationError
from dayplain_push.main import create_application
from dayplain_push.stores import json_file

from .conftest import REMINDER_MOMENT

SUB_A = {"endpoint": "https://push.example/a", "keys": {"p256dh": "pa", "auth": "aa"}}
SUB_B = {"endpoint": "https://push.example/b", "keys": {"p256dh": "pb", "auth": "ab"}}


def due_task(task_id: str = "t1", minutes: float = 20, **fields) -> dict:
    task = {
        "id": task_id,
        "title": "Prepare slides",
        "priority": "High",
        "status": "Planned",
        "dueDate": (REMINDER_MOMENT + timedelta(minutes=minutes)).isoformat(),
    }
    task.update(fields)
    return task


def test_health(client) -> None:
    client.post("/subscribe", json=SUB_A)
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["subscriptions"] == 1


def test_vapid_public_key(client) -> None:
    assert client.get("/vapid-public-key").json() == {"publicKey": "test-public-key"}


def test_missing_vapid_keys_refuse_to_start(tmp_path) -> None:
    config = Settings(_env_file=None, DATA_DIR=tmp_path, VAPID_PUBLIC_KEY=None, VAPID_PRIVATE_KEY=None)
    with pytest.raises(ConfigurationError):
        create_application(config)


# Subscriptions


def test_subscribe_created_then_existing(client) -> None:
    first = client.post("/subscribe", json={**SUB_A, "expirationTime": None})
    assert first.status_code == 201
    assert first.json() == {"message": "Subscription added"}

    again = client.post("/subscribe", json=SUB_A)
    assert again.status_code == 200
    assert again.json() == {"message": "Subscription already exists"}

    listed = client.get("/subscriptions").json()
    assert [s["endpoint"] for s in listed] == [SUB_A["endpoint"]]
    assert "createdAt" in listed[0]
    assert "keys" not in listed[0]


@pytest.mark.parametrize("body", [{}, {"keys": {}}, {"endpoint": ""}])
def test_subscribe_requires_endpoint(client, body) -> None:
    assert client.post("/subscribe", json=body).status_code == 400


def test_unsubscribe(client) -> None:
    client.post("/subscribe", json=SUB_A)

    assert client.post("/unsubscribe", json={"endpoint": SUB_A["endpoint"]}).status_code == 200
    assert client.post("/unsubscribe", json={"endpoint": SUB_A["endpoint"]}).status_code == 404
    assert client.post("/unsubscribe", json={}).status_code == 400


def test_subscribe_write_failure_is_500(client, monkeypatch) -> None:
    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(json_file.os, "replace", failing_replace)
    response = client.post("/subscribe", json=SUB_A)
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to persist changes"}


# Test send


def test_send_notification_bypasses_scheduling(client, sender) -> None:
    client.post("/subscribe", json=SUB_A)
    client.post("/subscribe", json=SUB_B)
    sender.responses[SUB_B["endpoint"]] = 410

    response = client.post("/send-notification", json={"title": "Hi", "body": "There", "data": {"k": 1}})

    assert response.status_code == 200
    assert response.json() == {"success": 1, "failed": 1, "total": 2}
    assert sender.sent[0].payload["data"] == {"k": 1}
    assert [s["endpoint"] for s in client.get("/subscriptions").json()] == [SUB_A["endpoint"]]


@pytest.mark.parametrize("body", [{"title": "Hi"}, {"body": "There"}, {"title": "", "body": "x"}])
def test_send_notification_requires_title_and_body(client, body) -> None:
    assert client.post("/send-notification", json=body).status_code == 400


# Settings


def test_get_default_settings(client) -> None:
    assert client.get("/settings").json() == {
        "reminderTime": "20:00",
        "habitRemindersEnabled": True,
        "taskRemindersEnabled": True,
        "quietHoursEnabled": False,
        "quietHoursStart": "22:00",
        "quietHoursEnd": "08:00",
    }


def test_put_settings_partial(client) -> None:
    response = client.put("/settings", json={"reminderTime": "07:30", "quietHoursEnabled": True})
    assert response.status_code == 200
    assert response.json()["reminderTime"] == "07:30"
    assert response.json()["quietHoursEnabled"] is True
    assert client.get("/settings").json()["reminderTime"] == "07:30"


@pytest.mark.parametrize("value", ["7:30", "0730", "24:00", "12:60", "noon"])
def test_put_settings_rejects_bad_time(client, value) -> None:
    assert client.put("/settings", json={"reminderTime": value}).status_code == 400
    assert client.get("/settings").json()["reminderTime"] == "20:00"


def test_put_settings_rejects_bad_quiet_hours(client) -> None:
    assert client.put("/settings", json={"quietHoursStart": "25:00"}).status_code == 400


def test_reminder_time_change_over_http_allows_second_send(app, client, sender, clock) -> None:
    scheduler = app.state.services.scheduler
    client.post("/subscribe", json=SUB_A)

    assert scheduler.run_daily_reminder_check() is True
    assert scheduler.run_daily_reminder_check() is False

    client.put("/settings", json={"reminderTime": "20:45"})
    assert app.state.services.state.load().habit_reminder_last_sent is None

    clock.current = REMINDER_MOMENT.replace(minute=45)
    assert scheduler.run_daily_reminder_check() is True
    assert sender.titles() == ["Daily Check-in", "Daily Check-in"]


# Task checks


def test_check_tasks_scenario(app, client, sender) -> None:
    client.post("/subscribe", json=SUB_A)

    first = client.post("/check-tasks", json={"tasks": [due_task("t1")]})
    assert first.json() == {"sent": 1}
    assert "t1" in app.state.services.state.load().task_notifications

    second = client.post("/check-tasks", json={"tasks": [due_task("t1")]})
    assert second.json() == {"sent": 0}
    assert sender.titles() == ["Task Due Soon"]


def test_check_tasks_filters(client) -> None:
    client.post("/subscribe", json=SUB_A)
    tasks = [
        due_task("a", priority="Medium"),
        due_task("b", status="Completed"),
        due_task("c", minutes=31),
        due_task("d", dueDate=None),
        due_task("e", priority="Critical", minutes=30),
    ]
    assert client.post("/check-tasks", json={"tasks": tasks}).json() == {"sent": 1}


@pytest.mark.parametrize("body", [{}, {"tasks": "t1"}, {"tasks": {"id": "t1"}}])
def test_check_tasks_requires_array(client, body) -> None:
    assert client.post("/check-tasks", json=body).status_code == 400


def test_check_tasks_skips_invalid_items(client, sender) -> None:
    client.post("/subscribe", json=SUB_A)
    tasks = [
        due_task("good"),
        due_task("urgent", priority="Urgent"),
        {"id": "untitled", "priority": "Low", "status": "Backlog"},
        "not-a-task",
    ]

    response = client.post("/check-tasks", json={"tasks": tasks})

    assert response.status_code == 200
    assert response.json() == {"sent": 1}
    assert [s.payload["data"]["taskId"] for s in sender.sent] == ["good"]


def test_check_tasks_with_empty_list(client) -> None:
    assert client.post("/check-tasks", json={"tasks": []}).json() == {"sent": 0}


def test_api_prefix(config, sender, clock) -> None:
    from fastapi.testclient import TestClient

    app = create_application(config.model_copy(update={"API_PREFIX": "/api"}), sender=sender, clock=clock)
    client = TestClient(app)
    assert client.get("/api/settings").status_code == 200
    assert client.get("/settings").status_code == 404
