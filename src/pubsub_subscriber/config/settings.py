from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pubsub_subscriber.config.env_aliases import get_flat_env_settings_source

DEFAULT_PUBSUB_NAME = "messagebus"
DEFAULT_TOPICS: tuple[str, ...] = ("pubsub-a-topic", "pubsub-b-topic", "pubsub-c-topic")


class _BaseSection(BaseModel):
    model_config = {"extra": "forbid"}


class ServerSettings(_BaseSection):
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)


class TopicSettings(_BaseSection):
    topic: str = Field(min_length=1)
    # Path segment the broker POSTs deliveries to; defaults to the topic name.
    route: str | None = None

    @model_validator(mode="after")
    def _default_route(self) -> TopicSettings:
        if self.route is None or not self.route.strip():
            self.route = self.topic
        else:
            self.route = self.route.strip()
        return self


def _default_topics() -> list[TopicSettings]:
    return [TopicSettings(topic=name) for name in DEFAULT_TOPICS]


class SubscriberSettings(_BaseSection):
    pubsub_name: str = Field(default=DEFAULT_PUBSUB_NAME, min_length=1)
    topics: list[TopicSettings] = Field(default_factory=_default_topics)


class ObservabilitySettings(_BaseSection):
    log_level: str = "INFO"
    log_format: str | None = None  # json|human (overrides LOG_FORMAT/env when set)
    json_logs: bool = False
    metrics_enabled: bool = False
    # When set, GET /metrics requires Authorization: Bearer <this token> (constant-time compare).
    metrics_bearer_token: SecretStr | None = None
    # When true, GET /healthz omits version and service name.
    healthz_omit_version: bool = False

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized in {"json", "human"}:
            return normalized
        raise ValueError("observability.log_format must be 'json' or 'human'")


class Settings(BaseSettings):
    # .env is loaded into os.environ by config.load; pydantic-settings must not
    # read it again or the flat names would be rejected as extra fields.
    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        extra="forbid",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    subscriber: SubscriberSettings = Field(default_factory=SubscriberSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Settings:
        """
        Construct Settings from a mapping without reading environment variables.

        Useful in tests where we want to pass nested dicts and keep mypy happy.
        """

        class _InitOnlySettings(Settings):
            @classmethod
            def settings_customise_sources(
                cls,
                settings_cls,
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
            ):
                return (init_settings,)

        return _InitOnlySettings(**dict(data))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            env_settings,
            get_flat_env_settings_source,
            init_settings,
            file_secret_settings,
        )
