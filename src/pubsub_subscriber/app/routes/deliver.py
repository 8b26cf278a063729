from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from starlette.requests import ClientDisconnect
from starlette.responses import Response

from pubsub_subscriber.app.context import get_subscriber_state, get_subscriptions
from pubsub_subscriber.app.responses import (
    STATUS_RETRY,
    STATUS_SUCCESS,
    app_response,
    drop_response,
    empty_json_response,
    empty_response,
)
from pubsub_subscriber.domain.messages import MessageExtractError, extract_message
from pubsub_subscriber.domain.state import RecordOutcome, SubscriberState
from pubsub_subscriber.domain.subscriptions import Subscription, topic_for_path
from pubsub_subscriber.observability.metrics import deliveries_total

log = structlog.get_logger(__name__)

_UNKNOWN_TOPIC_LABEL = "unknown"
_PREVIEW_CHARS = 64


def _preview(message: str) -> str:
    if len(message) <= _PREVIEW_CHARS:
        return message
    return message[:_PREVIEW_CHARS] + "..."


async def deliver_message(
    request: Request,
    state: SubscriberState = Depends(get_subscriber_state),
    subscriptions: list[Subscription] = Depends(get_subscriptions),
) -> Response:
    """
    Handle a message pushed by the broker.

    Malformed deliveries are answered with 200/DROP so the broker acks them
    instead of redelivering forever.
    """
    path = request.url.path
    topic = topic_for_path(subscriptions, path)
    topic_label = topic or _UNKNOWN_TOPIC_LABEL
    log.info("deliver.called", topic=topic)

    behavior = state.behavior()
    if behavior.respond_with_retry:
        deliveries_total.labels(topic=topic_label, outcome="retry").inc()
        return app_response(STATUS_RETRY, "retry later")
    if behavior.respond_with_error:
        deliveries_total.labels(topic=topic_label, outcome="error").inc()
        return empty_response(500)

    try:
        body = await request.body()
    except ClientDisconnect:
        log.warning("deliver.body_unreadable")
        deliveries_total.labels(topic=topic_label, outcome="dropped").inc()
        return drop_response("could not read request body")

    try:
        message = extract_message(body)
    except MessageExtractError as exc:
        log.warning("deliver.malformed", error=str(exc))
        deliveries_total.labels(topic=topic_label, outcome="dropped").inc()
        return drop_response(str(exc))

    outcome = state.record(topic, message)
    if outcome is not RecordOutcome.RECORDED:
        if outcome is RecordOutcome.DUPLICATE:
            log.warning(
                "deliver.duplicate",
                topic=topic,
                data_chars=len(message),
                data_preview=_preview(message),
            )
            deliveries_total.labels(topic=topic_label, outcome="duplicate").inc()
        else:
            log.warning("deliver.unknown_route")
            deliveries_total.labels(topic=topic_label, outcome="unknown_route").inc()
        return drop_response(f"Unexpected/Multiple redelivery of message from {path}")

    log.info(
        "deliver.recorded",
        topic=topic,
        data_chars=len(message),
        data_preview=_preview(message),
    )
    deliveries_total.labels(topic=topic_label, outcome="success").inc()
    if behavior.respond_with_empty_json:
        return empty_json_response()
    return app_response(STATUS_SUCCESS, "consumed")


def build_delivery_router(subscriptions: list[Subscription]) -> APIRouter:
    """One POST route per subscription, all served by `deliver_message`."""
    router = APIRouter()
    for subscription in subscriptions:
        router.add_api_route(
            "/" + subscription.route,
            deliver_message,
            methods=["POST"],
            name=f"deliver:{subscription.topic}",
        )
    return router
