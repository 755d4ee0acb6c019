import logging

from fastapi import APIRouter, HTTPException, Response, status

from dayplain_push.api.deps import ConfigDep, DispatcherDep, SubscriptionStoreDep
from dayplain_push.models import PushSubscription
from dayplain_push.schemas import (
    DispatchResult,
    MessageResponse,
    NotificationPayload,
    PushSubscriptionCreate,
    PushSubscriptionRead,
    SendNotificationRequest,
    UnsubscribeRequest,
    VapidPublicKeyRead,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/vapid-public-key", response_model=VapidPublicKeyRead)
def get_vapid_public_key(config: ConfigDep) -> VapidPublicKeyRead:
    """Get VAPID public key for push subscription."""
    return VapidPublicKeyRead(public_key=config.VAPID_PUBLIC_KEY or "")


@router.post(
    "/subscribe",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"model": MessageResponse, "description": "Subscription already exists"}},
)
def subscribe_to_push(
    *,
    payload: PushSubscriptionCreate,
    response: Response,
    registry: SubscriptionStoreDep,
) -> MessageResponse:
    """Store a push subscription. Registering the same endpoint twice is a no-op."""
    subscription = PushSubscription(endpoint=payload.endpoint, keys=payload.keys)

    if registry.add(subscription):
        logger.info("New subscription added")
        return MessageResponse(message="Subscription added")

    logger.info("Subscription already exists")
    response.status_code = status.HTTP_200_OK
    return MessageResponse(message="Subscription already exists")


@router.post("/unsubscribe", response_model=MessageResponse)
def unsubscribe_from_push(
    *,
    payload: UnsubscribeRequest,
    registry: SubscriptionStoreDep,
) -> MessageResponse:
    """Remove a push subscription."""
    if not registry.remove(payload.endpoint):
        logger.info("Subscription not found")
        raise HTTPException(status_code=404, detail="Subscription not found")

    logger.info("Subscription removed")
    return MessageResponse(message="Subscription removed")


@router.get("/subscriptions", response_model=list[PushSubscriptionRead])
def list_subscriptions(registry: SubscriptionStoreDep) -> list[PushSubscriptionRead]:
    """List registered endpoints."""
    return [
        PushSubscriptionRead(endpoint=s.endpoint, created_at=s.created_at)
        for s in registry.list()
    ]


@router.post("/send-notification", response_model=DispatchResult)
def send_notification(
    *,
    payload: SendNotificationRequest,
    dispatcher: DispatcherDep,
) -> DispatchResult:
    """Send a notification to every subscriber, bypassing reminder scheduling."""
    notification = NotificationPayload(
        title=payload.title,
        body=payload.body,
        data=payload.data or {},
    )
    return dispatcher.dispatch(notification)
