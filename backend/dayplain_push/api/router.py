from fastapi import APIRouter

from dayplain_push.api.v1 import health, push, settings, tasks

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(push.router, tags=["push"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(tasks.router, tags=["tasks"])
