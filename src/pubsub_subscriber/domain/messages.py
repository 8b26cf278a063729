from __future__ import annotations

import json
import re
from typing import Any

import structlog

log = structlog.get_logger(__name__)

# JSON \u escapes can name half of a surrogate pair on its own; such strings
# cannot be encoded back to UTF-8 for logs or responses.
_LONE_SURROGATE_RE = re.compile("[\ud800-\udfff]")
REPLACEMENT_CHARACTER = "\ufffd"


class MessageExtractError(ValueError):
    """The delivery body does not carry a usable string `data` payload."""


def extract_message(body: bytes) -> str:
    """
    Pull the `data` payload out of a delivery body.

    The body must be a JSON object with a string `data` field. Any envelope
    fields around it (id, source, type, ...) are ignored. Unpaired surrogate
    escapes in `data` come back as U+FFFD.
    """
    log.debug("deliver.extract_message", body_bytes=len(body))

    try:
        decoded: Any = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.info("deliver.unmarshal_failed", error=str(exc))
        raise MessageExtractError(f"could not decode body as JSON: {exc}") from exc
    except RecursionError as exc:
        log.info("deliver.unmarshal_failed", error="nesting too deep")
        raise MessageExtractError("could not decode body as JSON: nesting too deep") from exc

    if not isinstance(decoded, dict):
        raise MessageExtractError(
            f"expected a JSON object, got {type(decoded).__name__}"
        )
    if "data" not in decoded:
        raise MessageExtractError("missing 'data' field")

    data = decoded["data"]
    if not isinstance(data, str):
        raise MessageExtractError(
            f"'data' field must be a string, got {type(data).__name__}"
        )
    return _LONE_SURROGATE_RE.sub(REPLACEMENT_CHARACTER, data)
