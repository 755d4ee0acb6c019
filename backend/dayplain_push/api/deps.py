from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from dayplain_push.core.config import Settings
from dayplain_push.services.container import Services
from dayplain_push.services.reminders import ReminderScheduler
from dayplain_push.services.web_push import NotificationDispatcher
from dayplain_push.stores.settings_store import SettingsStore
from dayplain_push.stores.subscription_store import SubscriptionStore


def get_services(request: Request) -> Services:
    return request.app.state.services


ServicesDep = Annotated[Services, Depends(get_services)]


def get_config(services: ServicesDep) -> Settings:
    return services.config


def get_subscription_store(services: ServicesDep) -> SubscriptionStore:
    return services.subscriptions


def get_settings_store(services: ServicesDep) -> SettingsStore:
    return services.settings


def get_dispatcher(services: ServicesDep) -> NotificationDispatcher:
    return services.dispatcher


def get_scheduler(services: ServicesDep) -> ReminderScheduler:
    return services.scheduler


ConfigDep = Annotated[Settings, Depends(get_config)]
SubscriptionStoreDep = Annotated[SubscriptionStore, Depends(get_subscription_store)]
SettingsStoreDep = Annotated[SettingsStore, Depends(get_settings_store)]
DispatcherDep = Annotated[NotificationDispatcher, Depends(get_dispatcher)]
SchedulerDep = Annotated[ReminderScheduler, Depends(get_scheduler)]
