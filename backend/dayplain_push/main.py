import logging
import sys
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dayplain_push import __version__
from dayplain_push.api.router import api_router
from dayplain_push.core.config import Settings, get_settings
from dayplain_push.core.exceptions import ConfigurationError, StorageError
from dayplain_push.core.logging import setup_logging
from dayplain_push.core.ports import PushSender
from dayplain_push.services.container import build_services
from dayplain_push.services.reminders import Clock
from dayplain_push.tasks.reminders import build_reminder_ticker

logger = logging.getLogger(__name__)


def create_application(
    config: Optional[Settings] = None,
    *,
    sender: Optional[PushSender] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build the FastAPI app with its stores, dispatcher and scheduler.

    Raises ConfigurationError when no sender is injected and the VAPID keys
    are missing: the server must not run with notifications silently off.
    """
    config = config or get_settings()
    services = build_services(config, sender=sender, clock=clock)

    app = FastAPI(title=config.PROJECT_NAME, version=__version__)
    app.state.services = services
    app.state.ticker = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # Malformed bodies are rejected at the boundary with 400
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_errors(exc)},
        )

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Failed to persist changes"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.include_router(api_router, prefix=config.API_PREFIX)

    @app.on_event("startup")
    async def _startup() -> None:
        logger.info(f"Loaded {services.subscriptions.count()} subscription(s)")
        if not config.SCHEDULER_ENABLED:
            logger.info("Reminder scheduler disabled")
            return
        ticker = build_reminder_ticker(services.scheduler, config)
        ticker.start()
        app.state.ticker = ticker

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        if app.state.ticker is not None:
            await app.state.ticker.stop()
            app.state.ticker = None

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the raw input and exception objects."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def run() -> None:
    """Console entry point: configure logging, build the app and serve it."""
    import uvicorn

    config = get_settings()
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)

    try:
        app = create_application(config)
    except ConfigurationError as e:
        logger.critical(str(e))
        sys.exit(1)

    logger.info(f"{config.PROJECT_NAME} listening on {config.HOST}:{config.PORT}")
    logger.info(f"CORS enabled for: {config.FRONTEND_URL}")
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_config=None)


if __name__ == "__main__":
    run()
