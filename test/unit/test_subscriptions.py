from __future__ import annotations

from pubsub_subscriber.config.settings import Settings
from pubsub_subscriber.domain.subscriptions import (
    Subscription,
    build_subscriptions,
    topic_for_path,
)


def test_default_subscriptions() -> None:
    subscriptions = build_subscriptions(Settings.from_mapping({}))

    assert [s.as_dict() for s in subscriptions] == [
        {"pubsubname": "messagebus", "topic": "pubsub-a-topic", "route": "pubsub-a-topic"},
        {"pubsubname": "messagebus", "topic": "pubsub-b-topic", "route": "pubsub-b-topic"},
        {"pubsubname": "messagebus", "topic": "pubsub-c-topic", "route": "pubsub-c-topic"},
    ]


def test_custom_routes_and_pubsub_name() -> None:
    settings = Settings.from_mapping(
        {
            "subscriber": {
                "pubsub_name": "kafka-pubsub",
                "topics": [
                    {"topic": "orders", "route": "orders-handler"},
                    {"topic": "payments"},
                ],
            }
        }
    )

    assert build_subscriptions(settings) == [
        Subscription(pubsubname="kafka-pubsub", topic="orders", route="orders-handler"),
        Subscription(pubsubname="kafka-pubsub", topic="payments", route="payments"),
    ]


def test_topic_for_path_matches_last_segment() -> None:
    subscriptions = [
        Subscription(pubsubname="messagebus", topic="orders", route="orders-handler"),
        Subscription(pubsubname="messagebus", topic="a", route="a-topic"),
        Subscription(pubsubname="messagebus", topic="pubsub-a", route="pubsub-a-topic"),
    ]

    assert topic_for_path(subscriptions, "/orders-handler") == "orders"
    assert topic_for_path(subscriptions, "/orders-handler/") == "orders"
    assert topic_for_path(subscriptions, "/pubsub-a-topic") == "pubsub-a"
    assert topic_for_path(subscriptions, "/a-topic") == "a"
    assert topic_for_path(subscriptions, "/orders") is None
    assert topic_for_path(subscriptions, "/") is None
