from .notification import (
    DispatchResult,
    NotificationPayload,
    SendNotificationRequest,
)
from .push_subscription import (
    MessageResponse,
    PushSubscriptionCreate,
    PushSubscriptionRead,
    UnsubscribeRequest,
    VapidPublicKeyRead,
)
from .settings import NotificationSettingsUpdate
from .task import (
    CheckTasksRequest,
    CheckTasksResponse,
    Task,
    TaskPriority,
    TaskStatus,
)

__all__ = [
    "CheckTasksRequest",
    "CheckTasksResponse",
    "DispatchResult",
    "MessageResponse",
    "NotificationPayload",
    "NotificationSettingsUpdate",
    "PushSubscriptionCreate",
    "PushSubscriptionRead",
    "SendNotificationRequest",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "UnsubscribeRequest",
    "VapidPublicKeyRead",
]
