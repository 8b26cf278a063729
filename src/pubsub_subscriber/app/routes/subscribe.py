from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from pubsub_subscriber.app.context import get_subscriptions
from pubsub_subscriber.domain.subscriptions import Subscription

router = APIRouter()
log = structlog.get_logger(__name__)


@router.get("/dapr/subscribe")
def configure_subscribe(
    subscriptions: list[Subscription] = Depends(get_subscriptions),
) -> list[dict[str, str]]:
    payload = [subscription.as_dict() for subscription in subscriptions]
    log.info("subscribe.announced", subscriptions=payload)
    return payload
