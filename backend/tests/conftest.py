# backend/tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dayplain_push.core.config import Settings
from dayplain_push.main import create_application
from dayplain_push.services.reminders import ReminderScheduler
from dayplain_push.services.web_push import NotificationDispatcher

from .fakes import (
    FakePushSender,
    FixedClock,
    InMemorySettingsRepo,
    InMemoryStateRepo,
    InMemorySubscriptionRepo,
)

# 20:00:30 on a fixed day, inside the default reminder window
REMINDER_MOMENT = datetime(2026, 10, 18, 20, 0, 30, tzinfo=timezone.utc)


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(REMINDER_MOMENT)


@pytest.fixture()
def sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture()
def config(tmp_path: Path) -> Settings:
    """
    Settings isolated from the developer's environment and .env file.
    The ticker is disabled; tests drive the scheduler directly.
    """
    return Settings(
        _env_file=None,
        DATA_DIR=tmp_path / "data",
        VAPID_PUBLIC_KEY="test-public-key",
        VAPID_PRIVATE_KEY="test-private-key",
        SCHEDULER_ENABLED=False,
        TIMEZONE=None,
        API_PREFIX="",
    )


@pytest.fixture()
def app(config: Settings, sender: FakePushSender, clock: FixedClock):
    return create_application(config, sender=sender, clock=clock)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def memory_state() -> InMemoryStateRepo:
    return InMemoryStateRepo()


@pytest.fixture()
def memory_settings(memory_state: InMemoryStateRepo) -> InMemorySettingsRepo:
    return InMemorySettingsRepo(memory_state)


@pytest.fixture()
def memory_registry() -> InMemorySubscriptionRepo:
    return InMemorySubscriptionRepo(("https://push.example/a", "https://push.example/b"))


@pytest.fixture()
def scheduler(
    memory_settings: InMemorySettingsRepo,
    memory_state: InMemoryStateRepo,
    memory_registry: InMemorySubscriptionRepo,
    sender: FakePushSender,
    clock: FixedClock,
) -> ReminderScheduler:
    """Scheduler over in-memory stores and the fake sender."""
    dispatcher = NotificationDispatcher(memory_registry, sender)
    return ReminderScheduler(memory_settings, memory_state, memory_registry, dispatcher, clock=clock)
