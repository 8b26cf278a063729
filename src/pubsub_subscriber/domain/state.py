from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum


class RecordOutcome(str, Enum):
    RECORDED = "recorded"
    DUPLICATE = "duplicate"
    UNKNOWN_TOPIC = "unknown_topic"


@dataclass(frozen=True)
class Behavior:
    """Snapshot of the armed response modes."""

    respond_with_error: bool = False
    respond_with_retry: bool = False
    respond_with_empty_json: bool = False


class SubscriberState:
    """
    Received messages per topic plus the armed response modes.

    One lock guards everything. It is only held for in-memory work, so it is
    safe to take from async handlers as well as from threadpool handlers.
    Flags only ever go from False to True; `reset_messages` leaves them alone.
    """

    def __init__(self, topics: Iterable[str]) -> None:
        self._topics = tuple(topics)
        self._lock = threading.Lock()
        self._received: dict[str, set[str]] = {}
        self._behavior = Behavior()
        self.reset_messages()

    @property
    def topics(self) -> tuple[str, ...]:
        return self._topics

    def behavior(self) -> Behavior:
        with self._lock:
            return self._behavior

    def record(self, topic: str | None, message: str) -> RecordOutcome:
        with self._lock:
            received = self._received.get(topic) if topic is not None else None
            if received is None:
                return RecordOutcome.UNKNOWN_TOPIC
            if message in received:
                return RecordOutcome.DUPLICATE
            received.add(message)
            return RecordOutcome.RECORDED

    def received(self) -> dict[str, list[str]]:
        with self._lock:
            return {topic: sorted(self._received[topic]) for topic in self._topics}

    def reset_messages(self) -> None:
        with self._lock:
            self._received = {topic: set() for topic in self._topics}

    def arm_error(self) -> None:
        with self._lock:
            self._behavior = replace(self._behavior, respond_with_error=True)

    def arm_retry(self) -> None:
        with self._lock:
            self._behavior = replace(self._behavior, respond_with_retry=True)

    def arm_empty_json(self) -> None:
        with self._lock:
            self._behavior = replace(self._behavior, respond_with_empty_json=True)

    def counts(self) -> dict[str, int]:
        with self._lock:
            return {topic: len(self._received[topic]) for topic in self._topics}
