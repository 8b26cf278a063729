from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import SecretStr

REDACTED_VALUE = "[redacted]"

_SENSITIVE_KEY_FRAGMENTS = ("password", "token", "secret", "authorization", "api_key", "apikey")

_AUTHZ_SCHEME_RE = re.compile(
    r"(?i)\b(authorization)\s*[:=]\s*(bearer|token|basic)\s+([^\s,;]+)"
)
_COMMON_KV_SECRET_RE = re.compile(
    r"(?i)\b(token|bearer[_-]?token|secret|password|passwd)\s*[:=]\s*([^\s,;]+)"
)


def scrub_secrets_in_text(text: str) -> str:
    """Best-effort redaction for credentials embedded in free-form text."""
    if not text:
        return text

    out = _AUTHZ_SCHEME_RE.sub(r"\1: \2 " + REDACTED_VALUE, text)
    out = _COMMON_KV_SECRET_RE.sub(lambda m: f"{m.group(1)}={REDACTED_VALUE}", out)
    return out


def _is_sensitive_key(key: str) -> bool:
    normalized = key.strip().lower()
    return any(fragment in normalized for fragment in _SENSITIVE_KEY_FRAGMENTS)


def _redact_value(value: Any) -> Any:
    if isinstance(value, SecretStr):
        return REDACTED_VALUE
    if isinstance(value, str):
        return scrub_secrets_in_text(value)
    if isinstance(value, Mapping):
        return redact_settings_dict(value)
    if isinstance(value, list):
        return [_redact_value(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_redact_value(item) for item in value)
    return value


def redact_settings_dict(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Returns a deep-redacted copy of `data` (does not mutate input).

    Values under a sensitive key, and any `SecretStr`, become `REDACTED_VALUE`.
    A sensitive key holding None is left as None so dumps still show it is unset.
    """
    scrubbed: dict[str, Any] = {}
    for key, value in data.items():
        if _is_sensitive_key(str(key)) and value is not None:
            scrubbed[str(key)] = REDACTED_VALUE
        else:
            scrubbed[str(key)] = _redact_value(value)
    return scrubbed
