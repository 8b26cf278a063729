"""Flat environment variable names and deprecated aliases.

The nested form (``SERVER__PORT``) is handled by pydantic-settings itself; this
module maps the shorter flat names onto the nested settings tree and warns when
a legacy name is still in use.
"""
from __future__ import annotations

import os
import warnings
from collections.abc import Iterable, Mapping
from typing import Any

# Mapping of deprecated env vars to their canonical names
_DEPRECATED_ALIASES: dict[str, str] = {
    "APP_PORT": "SERVER_PORT",
}


def _warn_deprecated_env_var(old_name: str, new_name: str) -> None:
    warnings.warn(
        f"Environment variable '{old_name}' is deprecated. Use '{new_name}' instead. "
        f"Support for '{old_name}' will be removed in a future version.",
        DeprecationWarning,
        stacklevel=3,
    )


def _set_nested(data: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    node = data
    for part in path[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[path[-1]] = value


def _apply_alias_mappings(
    env: Mapping[str, str],
    data: dict[str, Any],
    mappings: Iterable[tuple[str, tuple[str, ...]]],
) -> None:
    for env_name, path in mappings:
        value = env.get(env_name)
        if value:
            _set_nested(data, path, value)


def _apply_deprecated_aliases(
    env: Mapping[str, str],
    data: dict[str, Any],
    deprecated_mappings: Iterable[tuple[str, str, tuple[str, ...]]],
) -> None:
    for old_name, new_name, path in deprecated_mappings:
        old_value = env.get(old_name)
        if not old_value:
            continue
        if env.get(new_name):
            continue
        _warn_deprecated_env_var(old_name, new_name)
        _set_nested(data, path, old_value)


_CANONICAL_MAPPINGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    # Server
    ("SERVER_HOST", ("server", "host")),
    ("SERVER_PORT", ("server", "port")),
    # Subscriber
    ("PUBSUB_NAME", ("subscriber", "pubsub_name")),
    # Observability
    ("LOG_LEVEL", ("observability", "log_level")),
    ("LOG_FORMAT", ("observability", "log_format")),
    ("LOG_JSON", ("observability", "json_logs")),
    ("METRICS_ENABLED", ("observability", "metrics_enabled")),
    ("METRICS_BEARER_TOKEN", ("observability", "metrics_bearer_token")),
    ("HEALTHZ_OMIT_VERSION", ("observability", "healthz_omit_version")),
)

_DEPRECATED_VALUE_MAPPINGS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("APP_PORT", "SERVER_PORT", ("server", "port")),
)


def get_flat_env_settings_source() -> dict[str, Any]:
    env = os.environ
    data: dict[str, Any] = {}

    _apply_alias_mappings(env, data, _CANONICAL_MAPPINGS)
    _apply_deprecated_aliases(env, data, _DEPRECATED_VALUE_MAPPINGS)

    return data


def flat_env_names() -> dict[str, str]:
    """Dotted settings path -> flat env var name, e.g. ``server.port`` -> ``SERVER_PORT``."""
    return {".".join(path): env_name for env_name, path in _CANONICAL_MAPPINGS}
