from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_ICON = "/favicon.ico"


class NotificationPayload(BaseModel):
    """JSON body delivered to the service worker's push handler."""

    title: str
    body: str
    icon: str = DEFAULT_ICON
    badge: str = DEFAULT_ICON
    tag: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)

    def serialize(self) -> str:
        return self.model_dump_json(exclude_none=True)


class SendNotificationRequest(BaseModel):
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    data: Optional[dict[str, Any]] = None


class DispatchResult(BaseModel):
    """Aggregate outcome of one fan-out."""

    success: int = 0
    failed: int = 0
    total: int = 0
