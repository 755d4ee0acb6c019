"""Persisted registry of Web Push endpoints."""

from __future__ import annotations

import logging
import shutil
import threading
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from dayplain_push.core.exceptions import StorageReadError, StorageWriteError
from dayplain_push.models import PushSubscription
from dayplain_push.stores.json_file import JsonFileStore

logger = logging.getLogger(__name__)


class SubscriptionStore:
    """
    File-backed list of push subscriptions, unique by endpoint.

    Every mutation rewrites the whole array with an atomic replace.
    An unreadable file is treated as an empty registry, and is copied to
    `<name>.corrupt` before the first mutation overwrites it.
    """

    def __init__(self, path: Path) -> None:
        self._file = JsonFileStore(path)
        self._lock = threading.RLock()

    @property
    def corrupt_path(self) -> Path:
        return self._file.path.with_name(f"{self._file.path.name}.corrupt")

    def list(self) -> list[PushSubscription]:
        return self._load()[0]

    def count(self) -> int:
        return len(self.list())

    def add(self, subscription: PushSubscription) -> bool:
        """Register an endpoint. Returns False if it is already registered."""
        with self._lock:
            subscriptions = self._load_for_update()
            if any(s.endpoint == subscription.endpoint for s in subscriptions):
                return False

            subscriptions.append(
                subscription.model_copy(update={"created_at": datetime.now(timezone.utc)})
            )
            self._save(subscriptions)
            return True

    def remove(self, endpoint: str) -> bool:
        """Drop an endpoint. Returns whether anything was removed."""
        with self._lock:
            subscriptions = self._load_for_update()
            remaining = [s for s in subscriptions if s.endpoint != endpoint]
            if len(remaining) == len(subscriptions):
                return False
            self._save(remaining)
            return True

    def _load(self) -> tuple[list[PushSubscription], bool]:
        """Parsed records and whether the document itself was readable."""
        try:
            data = self._file.read()
        except StorageReadError as e:
            logger.error(f"Error loading subscriptions: {e}")
            return [], False

        if data is None:
            return [], True
        if not isinstance(data, list):
            logger.error(f"Error loading subscriptions: expected an array in {self._file.path}")
            return [], False

        subscriptions = []
        for entry in data:
            try:
                subscriptions.append(PushSubscription.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping malformed subscription record: {e}")
        return subscriptions, True

    def _load_for_update(self) -> list[PushSubscription]:
        subscriptions, readable = self._load()
        if not readable:
            try:
                shutil.copyfile(self._file.path, self.corrupt_path)
            except OSError as e:
                raise StorageWriteError(
                    self.corrupt_path, f"cannot preserve unreadable registry: {e}", e
                ) from e
            logger.error(
                f"Unreadable subscription registry preserved as {self.corrupt_path}, "
                "starting a new one"
            )
        return subscriptions

    def _save(self, subscriptions: list[PushSubscription]) -> None:
        self._file.write([s.to_document() for s in subscriptions])
