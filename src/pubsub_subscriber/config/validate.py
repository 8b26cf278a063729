from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pydantic import ValidationError

from pubsub_subscriber.config.settings import Settings

# First path segments owned by the service itself; a topic route may not shadow them.
RESERVED_ROUTES = frozenset(
    {"", "healthz", "metrics", "dapr", "tests", "docs", "redoc", "openapi.json"}
)


@dataclass(frozen=True)
class ConfigValidationIssue:
    path: str
    message: str


class ConfigValidationError(ValueError):
    def __init__(self, issues: Iterable[ConfigValidationIssue]):
        self.issues = list(issues)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = ["Configuration is invalid:"]
        for issue in self.issues:
            lines.append(f"- {issue.path}: {issue.message}")
        return "\n".join(lines)


def issues_from_pydantic_error(error: ValidationError) -> list[ConfigValidationIssue]:
    issues: list[ConfigValidationIssue] = []
    for item in error.errors(include_url=False):
        loc = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        msg = item.get("msg", "Invalid value")
        issues.append(ConfigValidationIssue(path=loc, message=msg))
    return issues


def _validate_topics(settings: Settings, issues: list[ConfigValidationIssue]) -> None:
    topics = settings.subscriber.topics
    if not topics:
        issues.append(
            ConfigValidationIssue(
                path="subscriber.topics",
                message="At least one topic subscription is required",
            )
        )
        return

    seen_topics: set[str] = set()
    seen_routes: set[str] = set()
    for index, item in enumerate(topics):
        route = str(item.route)
        if item.topic in seen_topics:
            issues.append(
                ConfigValidationIssue(
                    path=f"subscriber.topics.{index}.topic",
                    message=f"Duplicate topic {item.topic!r}",
                )
            )
        seen_topics.add(item.topic)

        if "/" in route:
            issues.append(
                ConfigValidationIssue(
                    path=f"subscriber.topics.{index}.route",
                    message=f"Route {route!r} must be a single path segment (no '/')",
                )
            )
        elif route in RESERVED_ROUTES:
            issues.append(
                ConfigValidationIssue(
                    path=f"subscriber.topics.{index}.route",
                    message=f"Route {route!r} collides with a built-in endpoint",
                )
            )

        if route in seen_routes:
            issues.append(
                ConfigValidationIssue(
                    path=f"subscriber.topics.{index}.route",
                    message=f"Duplicate route {route!r}",
                )
            )
        seen_routes.add(route)


def validate_settings(settings: Settings) -> None:
    issues: list[ConfigValidationIssue] = []

    log_level = settings.observability.log_level.upper()
    allowed_levels = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
    if log_level not in allowed_levels:
        issues.append(
            ConfigValidationIssue(
                path="observability.log_level",
                message=(
                    f"Unsupported log level {settings.observability.log_level!r} "
                    f"(allowed: {sorted(allowed_levels)})"
                ),
            )
        )

    _validate_topics(settings, issues)

    if issues:
        raise ConfigValidationError(issues)
