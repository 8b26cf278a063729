from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    generate_latest,
)

deliveries_total = Counter(
    "deliveries_total",
    "Number of message deliveries handled, by topic and outcome.",
    labelnames=("topic", "outcome"),
)
control_calls_total = Counter(
    "control_calls_total",
    "Number of test control endpoint calls.",
    labelnames=("action",),
)


def render_latest(*, registry=REGISTRY) -> tuple[bytes, str]:
    return generate_latest(registry), CONTENT_TYPE_LATEST
