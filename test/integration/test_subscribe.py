from __future__ import annotations

from fastapi.testclient import TestClient

from pubsub_subscriber.app.server import create_app
from pubsub_subscriber.config.settings import Settings


def test_dapr_subscribe_lists_default_topics(client: TestClient) -> None:
    response = client.get("/dapr/subscribe")

    assert response.status_code == 200
    assert response.json() == [
        {"pubsubname": "messagebus", "topic": "pubsub-a-topic", "route": "pubsub-a-topic"},
        {"pubsubname": "messagebus", "topic": "pubsub-b-topic", "route": "pubsub-b-topic"},
        {"pubsubname": "messagebus", "topic": "pubsub-c-topic", "route": "pubsub-c-topic"},
    ]


def test_dapr_subscribe_follows_configuration() -> None:
    settings = Settings.from_mapping(
        {
            "subscriber": {
                "pubsub_name": "kafka-pubsub",
                "topics": [{"topic": "orders", "route": "orders-handler"}],
            }
        }
    )
    client = TestClient(create_app(settings))

    response = client.get("/dapr/subscribe")

    assert response.json() == [
        {"pubsubname": "kafka-pubsub", "topic": "orders", "route": "orders-handler"}
    ]


def test_dapr_subscribe_has_no_side_effects(client: TestClient) -> None:
    client.get("/dapr/subscribe")
    client.get("/dapr/subscribe")

    assert client.post("/tests/get").json() == {
        "pubsub-a-topic": [],
        "pubsub-b-topic": [],
        "pubsub-c-topic": [],
    }
