from __future__ import annotations

import argparse
import json

import pytest

from pubsub_subscriber import cli
from pubsub_subscriber.config.settings import Settings
from pubsub_subscriber.config.validate import ConfigValidationError, ConfigValidationIssue


def test_cmd_validate_config_ok(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "load_settings", lambda: Settings.from_mapping({}))

    rc = cli.cmd_validate_config(argparse.Namespace())
    assert rc == 0
    out = capsys.readouterr().out
    assert "Configuration is valid" in out
    assert "pubsub-a-topic, pubsub-b-topic, pubsub-c-topic" in out


def test_cmd_validate_config_invalid(monkeypatch, capsys) -> None:
    def _fail():
        raise ConfigValidationError([ConfigValidationIssue("server.port", "bad port")])

    monkeypatch.setattr(cli, "load_settings", _fail)

    rc = cli.cmd_validate_config(argparse.Namespace())
    assert rc == 1
    assert "server.port: bad port" in capsys.readouterr().err


def test_cmd_dump_config_redacts_secrets(monkeypatch, capsys) -> None:
    settings = Settings.from_mapping(
        {"observability": {"metrics_enabled": True, "metrics_bearer_token": "scrape-token"}}
    )
    monkeypatch.setattr(cli, "load_settings", lambda: settings)

    rc = cli.cmd_dump_config(argparse.Namespace())
    assert rc == 0
    out = capsys.readouterr().out
    parsed = json.loads(out)
    assert parsed["observability"]["metrics_bearer_token"] == "[redacted]"
    assert parsed["server"]["port"] == 3000
    assert "scrape-token" not in out


def test_cmd_subscriptions_prints_descriptors(monkeypatch, capsys) -> None:
    settings = Settings.from_mapping(
        {"subscriber": {"pubsub_name": "bus", "topics": [{"topic": "orders"}]}}
    )
    monkeypatch.setattr(cli, "load_settings", lambda: settings)

    rc = cli.cmd_subscriptions(argparse.Namespace())
    assert rc == 0
    parsed = json.loads(capsys.readouterr().out)
    assert parsed == [{"pubsubname": "bus", "topic": "orders", "route": "orders"}]


def test_cmd_show_deprecated_none(monkeypatch, capsys) -> None:
    monkeypatch.delenv("APP_PORT", raising=False)

    rc = cli.cmd_show_deprecated(argparse.Namespace())
    assert rc == 0
    assert "No deprecated environment variables in use." in capsys.readouterr().out


def test_cmd_show_deprecated_lists_app_port(monkeypatch, capsys) -> None:
    monkeypatch.setenv("APP_PORT", "3000")
    monkeypatch.delenv("SERVER_PORT", raising=False)

    rc = cli.cmd_show_deprecated(argparse.Namespace())
    assert rc == 0
    out = capsys.readouterr().out
    assert "APP_PORT → SERVER_PORT" in out
    assert "NEEDS MIGRATION" in out


def test_main_without_command_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "pubsub-subscriber-cli" in capsys.readouterr().out


def test_main_rejects_unknown_command() -> None:
    with pytest.raises(SystemExit):
        cli.main(["nope"])
