"""Endpoints the integration test harness uses to inspect and steer the subscriber."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from pubsub_subscriber.app.context import get_subscriber_state
from pubsub_subscriber.app.responses import empty_response
from pubsub_subscriber.domain.state import SubscriberState
from pubsub_subscriber.observability.metrics import control_calls_total

router = APIRouter(prefix="/tests")
log = structlog.get_logger(__name__)


async def _discard_body(request: Request) -> None:
    await request.body()


@router.post("/get")
def get_received_messages(
    state: SubscriberState = Depends(get_subscriber_state),
) -> dict[str, list[str]]:
    received = state.received()
    counts = {topic: len(items) for topic, items in received.items()}
    log.info("control.get_received", counts=counts)
    control_calls_total.labels(action="get").inc()
    return received


@router.post("/set-respond-error")
async def set_respond_with_error(
    request: Request,
    state: SubscriberState = Depends(get_subscriber_state),
) -> Response:
    await _discard_body(request)
    state.arm_error()
    log.info("control.set_respond_error")
    control_calls_total.labels(action="set_respond_error").inc()
    return empty_response()


@router.post("/set-respond-retry")
async def set_respond_with_retry(
    request: Request,
    state: SubscriberState = Depends(get_subscriber_state),
) -> Response:
    await _discard_body(request)
    state.arm_retry()
    log.info("control.set_respond_retry")
    control_calls_total.labels(action="set_respond_retry").inc()
    return empty_response()


@router.post("/set-respond-empty-json")
async def set_respond_empty_json(
    request: Request,
    state: SubscriberState = Depends(get_subscriber_state),
) -> Response:
    await _discard_body(request)
    state.arm_empty_json()
    log.info("control.set_respond_empty_json")
    control_calls_total.labels(action="set_respond_empty_json").inc()
    return empty_response()


@router.post("/initialize")
async def initialize(
    request: Request,
    state: SubscriberState = Depends(get_subscriber_state),
) -> Response:
    await _discard_body(request)
    state.reset_messages()
    log.info("control.initialize")
    control_calls_total.labels(action="initialize").inc()
    return empty_response()
