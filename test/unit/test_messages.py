from __future__ import annotations

import pytest

from pubsub_subscriber.domain.messages import MessageExtractError, extract_message


def test_extract_message_returns_data_string() -> None:
    assert extract_message(b'{"data": "hello"}') == "hello"


def test_extract_message_ignores_envelope_fields() -> None:
    body = (
        b'{"id": "5929aaac", "source": "app", "type": "com.dapr.event.sent",'
        b' "specversion": "1.0", "datacontenttype": "text/plain", "data": "payload-1"}'
    )
    assert extract_message(body) == "payload-1"


def test_extract_message_accepts_empty_string() -> None:
    assert extract_message(b'{"data": ""}') == ""


@pytest.mark.parametrize(
    ("body", "fragment"),
    [
        (b"", "could not decode body as JSON"),
        (b"not json", "could not decode body as JSON"),
        (b"\xff\xfe", "could not decode body as JSON"),
        (b'["data"]', "expected a JSON object, got list"),
        (b"null", "expected a JSON object, got NoneType"),
        (b'{"message": "hello"}', "missing 'data' field"),
        (b'{"data": 42}', "'data' field must be a string, got int"),
        (b'{"data": {"nested": "x"}}', "'data' field must be a string, got dict"),
        (b'{"data": null}', "'data' field must be a string, got NoneType"),
    ],
)
def test_extract_message_rejects_unusable_bodies(body: bytes, fragment: str) -> None:
    with pytest.raises(MessageExtractError) as exc_info:
        extract_message(body)

    assert fragment in str(exc_info.value)


def test_message_extract_error_is_value_error() -> None:
    assert issubclass(MessageExtractError, ValueError)


def test_extract_message_replaces_unpaired_surrogates() -> None:
    assert extract_message(b'{"data": "a\\ud800b"}') == "a\ufffdb"
    assert extract_message(b'{"data": "\\udfff"}') == "\ufffd"


def test_extract_message_keeps_escaped_surrogate_pairs() -> None:
    assert extract_message(b'{"data": "\\ud83d\\ude00"}') == "\U0001f600"


def test_extract_message_rejects_excessive_nesting() -> None:
    depth = 100_000
    body = b'{"data": ' + b"[" * depth + b"]" * depth + b"}"

    with pytest.raises(MessageExtractError, match="nesting too deep"):
        extract_message(body)
