from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from dayplain_push.core.config import Settings
from dayplain_push.core.ports import PushSender
from dayplain_push.services.reminders import Clock, ReminderScheduler, local_clock
from dayplain_push.services.web_push import NotificationDispatcher, WebPushSender
from dayplain_push.stores.settings_store import SettingsStore
from dayplain_push.stores.state_store import StateStore
from dayplain_push.stores.subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Services:
    """Process-wide stores and services, built once at startup."""

    config: Settings
    subscriptions: SubscriptionStore
    state: StateStore
    settings: SettingsStore
    dispatcher: NotificationDispatcher
    scheduler: ReminderScheduler


def build_services(
    config: Settings,
    *,
    sender: Optional[PushSender] = None,
    clock: Optional[Clock] = None,
) -> Services:
    """
    Wire the file-backed stores to the dispatcher and the scheduler.

    Without an explicit sender the VAPID keys are required and a missing key
    raises ConfigurationError.
    """
    if sender is None:
        sender = WebPushSender.from_settings(config)

    subscriptions = SubscriptionStore(config.subscriptions_file)
    state = StateStore(config.state_file)
    settings = SettingsStore(config.settings_file, state)
    dispatcher = NotificationDispatcher(subscriptions, sender)
    scheduler = ReminderScheduler(
        settings,
        state,
        subscriptions,
        dispatcher,
        clock=clock or local_clock(config.TIMEZONE),
    )
    logger.info(f"Data directory: {config.DATA_DIR.resolve()}")
    return Services(
        config=config,
        subscriptions=subscriptions,
        state=state,
        settings=settings,
        dispatcher=dispatcher,
        scheduler=scheduler,
    )
