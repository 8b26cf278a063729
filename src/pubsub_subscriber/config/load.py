"""Assemble `Settings` from `.env`, an optional YAML file and the process env.

Precedence, highest first: process env (flat or ``SECTION__FIELD``), `.env`
(only fills names the process env leaves unset), YAML, defaults.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from pubsub_subscriber.config.env_aliases import flat_env_names
from pubsub_subscriber.config.settings import Settings
from pubsub_subscriber.config.validate import (
    ConfigValidationError,
    ConfigValidationIssue,
    issues_from_pydantic_error,
    validate_settings,
)

DEFAULT_CONFIG_PATH = Path("config/config.yaml")
DOTENV_PATH = Path(".env")

_TOPICS_HINT = (
    "Topics are configured in YAML only, as a list under `subscriber.topics` "
    "of `{topic: <name>, route: <path segment>}` entries."
)


def _config_error(path: str, message: str) -> ConfigValidationError:
    return ConfigValidationError([ConfigValidationIssue(path=path, message=message)])


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise _config_error(str(path), f"Unable to read config file: {exc}") from exc
    except yaml.YAMLError as exc:
        raise _config_error(str(path), f"Invalid YAML: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise _config_error(str(path), "YAML root must be a mapping/object")
    return raw


def _yaml_source(config_path: str | Path | None) -> dict[str, Any]:
    """
    YAML settings, or `{}` when there is no file to read.

    A path passed in or named by CONFIG_PATH must exist. The default
    `config/config.yaml` is optional.
    """
    requested = config_path if config_path is not None else os.environ.get("CONFIG_PATH")
    if requested:
        path = Path(requested)
        if not path.exists():
            raise _config_error("CONFIG_PATH", f"Config file not found: {path}")
        return _read_yaml_mapping(path)

    if DEFAULT_CONFIG_PATH.exists():
        return _read_yaml_mapping(DEFAULT_CONFIG_PATH)
    return {}


def _hint_for(issue_path: str, env_names: dict[str, str]) -> str | None:
    if issue_path == "subscriber.topics" or issue_path.startswith("subscriber.topics."):
        return _TOPICS_HINT
    env_name = env_names.get(issue_path)
    if env_name is None:
        return None
    return f"Set `{env_name}` (or YAML `{issue_path}`)."


def _with_hints(issues: list[ConfigValidationIssue]) -> ConfigValidationError:
    env_names = flat_env_names()
    enriched: list[ConfigValidationIssue] = []
    for issue in issues:
        hint = _hint_for(issue.path, env_names)
        if hint and hint not in issue.message:
            issue = ConfigValidationIssue(issue.path, f"{issue.message} {hint}")
        enriched.append(issue)
    return ConfigValidationError(enriched)


def load_settings(*, config_path: str | Path | None = None) -> Settings:
    if DOTENV_PATH.is_file():
        load_dotenv(dotenv_path=DOTENV_PATH, override=False)

    yaml_data = _yaml_source(config_path)

    try:
        settings = Settings(**yaml_data)
    except ValidationError as exc:
        raise _with_hints(issues_from_pydantic_error(exc)) from exc

    try:
        validate_settings(settings)
    except ConfigValidationError as exc:
        raise _with_hints(exc.issues) from exc
    return settings
