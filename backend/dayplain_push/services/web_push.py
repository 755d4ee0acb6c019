import logging
from typing import Optional

import requests
from pywebpush import WebPushException, webpush

from dayplain_push.core.config import Settings
from dayplain_push.core.ports import PushSender, SendOutcome, SubscriptionRepo
from dayplain_push.models import PushSubscription
from dayplain_push.schemas import DispatchResult, NotificationPayload

logger = logging.getLogger(__name__)

# Push service answers meaning the subscription is expired or unknown
GONE_STATUS_CODES = frozenset({404, 410})


def _short(endpoint: str) -> str:
    return f"{endpoint[:50]}..." if len(endpoint) > 50 else endpoint


class WebPushSender:
    """Sends encrypted Web Push messages with VAPID authentication."""

    def __init__(
        self,
        vapid_private_key: str,
        vapid_subject: str,
        *,
        timeout: float = 10.0,
        ttl: int = 86400,
    ) -> None:
        self.vapid_private_key = vapid_private_key
        self.vapid_claims = {"sub": vapid_subject}
        self.timeout = timeout
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "WebPushSender":
        settings.require_vapid()
        return cls(
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_subject=settings.VAPID_SUBJECT,
            timeout=settings.PUSH_TIMEOUT_SECONDS,
            ttl=settings.PUSH_TTL_SECONDS,
        )

    def send(self, subscription: PushSubscription, payload: str) -> SendOutcome:
        try:
            webpush(
                subscription_info=subscription.subscription_info(),
                data=payload,
                vapid_private_key=self.vapid_private_key,
                # pywebpush fills in "aud" and "exp" from the endpoint
                vapid_claims=dict(self.vapid_claims),
                ttl=self.ttl,
                timeout=self.timeout,
            )
        except WebPushException as e:
            status_code: Optional[int] = None
            if e.response is not None:
                status_code = e.response.status_code
            return SendOutcome(ok=False, status_code=status_code, error=str(e))
        except requests.exceptions.RequestException as e:
            # Timeouts and connection errors say nothing about the endpoint itself
            return SendOutcome(ok=False, error=f"{type(e).__name__}: {e}")
        return SendOutcome(ok=True, status_code=201)


class NotificationDispatcher:
    """
    Fans a payload out to every registered subscription.

    Sends are sequential and isolated: a failure for one endpoint never stops
    delivery to the others. Endpoints the push service reports as gone are
    removed from the registry. Nothing is retried here; transient failures are
    left for the next reminder cycle.
    """

    def __init__(self, registry: SubscriptionRepo, sender: PushSender) -> None:
        self.registry = registry
        self.sender = sender

    def dispatch(self, payload: NotificationPayload) -> DispatchResult:
        subscriptions = self.registry.list()
        result = DispatchResult(total=len(subscriptions))
        if not subscriptions:
            logger.info("No push subscriptions, nothing to send")
            return result

        data = payload.serialize()
        for subscription in subscriptions:
            outcome = self._send_one(subscription, data)
            if outcome.ok:
                result.success += 1
                logger.debug(f"Web push sent, endpoint: {_short(subscription.endpoint)}")
                continue

            result.failed += 1
            logger.error(
                f"Failed to send web push to {_short(subscription.endpoint)} "
                f"(status={outcome.status_code}): {outcome.error}"
            )
            if outcome.status_code in GONE_STATUS_CODES:
                self._prune(subscription)

        logger.info(
            f"Web push '{payload.title}': sent {result.success}/{result.total}, "
            f"{result.failed} failed"
        )
        return result

    def _send_one(self, subscription: PushSubscription, data: str) -> SendOutcome:
        try:
            return self.sender.send(subscription, data)
        except Exception as e:
            logger.exception(f"Push sender crashed for {_short(subscription.endpoint)}")
            return SendOutcome(ok=False, error=f"{type(e).__name__}: {e}")

    def _prune(self, subscription: PushSubscription) -> None:
        logger.info(f"Removing invalid subscription {_short(subscription.endpoint)}")
        try:
            self.registry.remove(subscription.endpoint)
        except Exception:
            # The endpoint will be pruned again on the next failed send
            logger.exception(f"Failed to remove subscription {_short(subscription.endpoint)}")
