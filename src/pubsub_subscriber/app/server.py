from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from pubsub_subscriber._version import __version__
from pubsub_subscriber.app.constants import REQUEST_ID_HEADER, SERVICE_NAME
from pubsub_subscriber.app.middleware.request_id import RequestIdMiddleware
from pubsub_subscriber.app.responses import api_error
from pubsub_subscriber.app.routes.control import router as control_router
from pubsub_subscriber.app.routes.deliver import build_delivery_router
from pubsub_subscriber.app.routes.index import router as index_router
from pubsub_subscriber.app.routes.subscribe import router as subscribe_router
from pubsub_subscriber.config.settings import Settings
from pubsub_subscriber.domain.state import SubscriberState
from pubsub_subscriber.domain.subscriptions import build_subscriptions

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    log.info(
        "server.startup",
        host=settings.server.host,
        port=settings.server.port,
        topics=list(app.state.subscriber.topics),
    )
    yield
    state: SubscriberState = app.state.subscriber
    log.info("server.shutdown", received=state.counts())
    state.reset_messages()


async def _global_exception_handler(request, exc):
    request_id = getattr(request.state, "request_id", None)
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    log.error("server.unhandled_error", path=request.url.path, exc_info=exc)
    return api_error(
        500,
        "An internal server error occurred.",
        code="internal_error",
        request_id=request_id,
        headers=headers,
    )


def _wire_app(app: FastAPI, *, settings: Settings) -> None:
    subscriptions = build_subscriptions(settings)

    app.state.settings = settings
    app.state.subscriptions = subscriptions
    app.state.subscriber = SubscriberState(s.topic for s in subscriptions)

    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(Exception, _global_exception_handler)

    app.include_router(index_router)
    app.include_router(subscribe_router)
    app.include_router(control_router)
    app.include_router(build_delivery_router(subscriptions))
    if settings.observability.metrics_enabled:
        from pubsub_subscriber.app.routes.metrics import router as metrics_router

        app.include_router(metrics_router)


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(title=SERVICE_NAME, version=__version__, lifespan=lifespan)
    _wire_app(app, settings=settings if settings is not None else Settings.from_mapping({}))
    return app
