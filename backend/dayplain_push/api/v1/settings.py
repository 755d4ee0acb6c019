import logging

from fastapi import APIRouter

from dayplain_push.api.deps import SchedulerDep, SettingsStoreDep
from dayplain_push.models import NotificationSettings
from dayplain_push.schemas import NotificationSettingsUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NotificationSettings)
def read_settings(settings_store: SettingsStoreDep) -> NotificationSettings:
    """Get current notification settings."""
    return settings_store.load()


@router.put("", response_model=NotificationSettings)
def update_settings(
    payload: NotificationSettingsUpdate,
    scheduler: SchedulerDep,
) -> NotificationSettings:
    """Update notification settings. Time fields must be "HH:MM"."""
    changes = payload.changes()
    updated = scheduler.update_settings(changes)
    logger.info(f"Settings updated: {changes}")
    return updated
