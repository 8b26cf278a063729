from __future__ import annotations

from dataclasses import asdict, dataclass

from pubsub_subscriber.config.settings import Settings


@dataclass(frozen=True)
class Subscription:
    pubsubname: str
    topic: str
    route: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


def build_subscriptions(settings: Settings) -> list[Subscription]:
    """Subscriptions announced on /dapr/subscribe, in configuration order."""
    pubsub_name = settings.subscriber.pubsub_name
    return [
        Subscription(pubsubname=pubsub_name, topic=item.topic, route=str(item.route))
        for item in settings.subscriber.topics
    ]


def topic_for_path(subscriptions: list[Subscription], path: str) -> str | None:
    """Resolve the topic a delivery path belongs to by its last path segment."""
    suffix = path.rstrip("/").rsplit("/", 1)[-1]
    for subscription in subscriptions:
        if suffix == subscription.route:
            return subscription.topic
    return None
