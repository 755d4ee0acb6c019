"""Persisted reminder preferences."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from dayplain_push.core.exceptions import StorageReadError
from dayplain_push.core.ports import StateRepo
from dayplain_push.models import NotificationSettings
from dayplain_push.stores.json_file import JsonFileStore

logger = logging.getLogger(__name__)


class SettingsStore:
    """File-backed NotificationSettings merged over defaults."""

    def __init__(self, path: Path, state_store: StateRepo) -> None:
        # Settings are low-value enough to be overwritten in place when
        # the platform refuses the atomic rename.
        self._file = JsonFileStore(path, allow_direct_write=True)
        self._state_store = state_store
        self._lock = threading.RLock()

    def load(self) -> NotificationSettings:
        """Return persisted settings, or defaults when they cannot be read."""
        defaults = NotificationSettings()
        try:
            data = self._file.read()
        except StorageReadError as e:
            logger.error(f"Error loading settings: {e}")
            return defaults

        if data is None:
            return defaults
        if not isinstance(data, dict):
            logger.error(f"Error loading settings: expected an object in {self._file.path}")
            return defaults

        try:
            return NotificationSettings.model_validate({**defaults.to_document(), **data})
        except ValidationError as e:
            logger.error(f"Error loading settings: {e}")
            return defaults

    def save(self, settings: NotificationSettings) -> None:
        with self._lock:
            self._file.write(settings.to_document())

    def update(self, updates: Mapping[str, Any]) -> NotificationSettings:
        """
        Merge partial settings (camelCase or snake_case keys) and persist them.

        A changed reminder time clears today's habit reminder marker so the
        reminder can fire again at the new time on the same day.
        """
        with self._lock:
            current = self.load()
            changes = {
                key if "_" not in key else to_camel(key): value
                for key, value in updates.items()
            }
            merged = NotificationSettings.model_validate({**current.to_document(), **changes})
            self.save(merged)

            if merged.reminder_time != current.reminder_time:
                self._state_store.reset_habit_reminder()
                logger.info(
                    f"Reminder time changed {current.reminder_time} -> {merged.reminder_time}, "
                    "reset daily reminder state"
                )
            return merged
