from datetime import datetime, timezone

from fastapi import APIRouter

from dayplain_push.api.deps import SubscriptionStoreDep

router = APIRouter()


@router.get("/health", summary="Health check", tags=["health"])
def read_health(registry: SubscriptionStoreDep) -> dict:
    """Return basic service health information."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "subscriptions": registry.count(),
    }
