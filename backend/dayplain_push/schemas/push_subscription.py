from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from dayplain_push.models.base import CamelModel


class PushSubscriptionCreate(CamelModel):
    """Subscription descriptor as produced by PushSubscription.toJSON() in the browser."""

    endpoint: str = Field(..., min_length=1, max_length=2048)
    keys: dict[str, str] = Field(default_factory=dict, description="p256dh and auth")
    expiration_time: Optional[float] = None


class UnsubscribeRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)


class PushSubscriptionRead(CamelModel):
    """Registered endpoint. Key material is not echoed back."""

    endpoint: str
    created_at: datetime


class VapidPublicKeyRead(CamelModel):
    public_key: str


class MessageResponse(BaseModel):
    message: str
