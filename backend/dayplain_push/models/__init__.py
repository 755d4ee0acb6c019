from .notification_settings import NotificationSettings
from .notification_state import NotificationState
from .push_subscription import PushSubscription

__all__ = [
    "NotificationSettings",
    "NotificationState",
    "PushSubscription",
]
