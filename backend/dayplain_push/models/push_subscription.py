from __future__ import annotations

from datetime import datetime, timezone

from pydantic import Field

from dayplain_push.models.base import CamelModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PushSubscription(CamelModel):
    """Web Push subscription for browser notifications."""

    endpoint: str = Field(min_length=1)
    # Encryption material from the browser (p256dh, auth)
    keys: dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)

    def subscription_info(self) -> dict:
        """Shape expected by pywebpush."""
        return {"endpoint": self.endpoint, "keys": dict(self.keys)}
