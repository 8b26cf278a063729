"""FastAPI dependencies that hand the per-app state to route handlers."""

from __future__ import annotations

from fastapi import Request

from pubsub_subscriber.domain.state import SubscriberState
from pubsub_subscriber.domain.subscriptions import Subscription


def get_subscriber_state(request: Request) -> SubscriberState:
    return request.app.state.subscriber


def get_subscriptions(request: Request) -> list[Subscription]:
    return request.app.state.subscriptions
