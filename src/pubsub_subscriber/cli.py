"""CLI commands for pubsub-subscriber.

This module provides command-line utilities for:
- Validating configuration
- Dumping configuration (with secrets redacted)
- Showing deprecated environment variables
- Printing the subscriptions the service announces to the sidecar
"""
from __future__ import annotations

import argparse
import json
import os
import sys

from pubsub_subscriber.config.env_aliases import _DEPRECATED_ALIASES
from pubsub_subscriber.config.load import load_settings
from pubsub_subscriber.config.redact import redact_settings_dict
from pubsub_subscriber.domain.subscriptions import build_subscriptions


def cmd_validate_config(args: argparse.Namespace) -> int:
    """Validate configuration and exit with appropriate code.

    Exit codes:
        0: Configuration is valid
        1: Configuration is invalid
    """
    try:
        settings = load_settings()
    except Exception as e:
        print(f"✗ Configuration is invalid: {e}", file=sys.stderr)
        return 1

    print("✓ Configuration is valid")
    print(f"  - Listen: {settings.server.host}:{settings.server.port}")
    print(f"  - Pubsub component: {settings.subscriber.pubsub_name}")
    print(f"  - Topics: {', '.join(t.topic for t in settings.subscriber.topics)}")
    print(f"  - Metrics enabled: {settings.observability.metrics_enabled}")
    return 0


def cmd_dump_config(args: argparse.Namespace) -> int:
    """Dump current configuration as JSON (with secrets redacted)."""
    try:
        settings = load_settings()
    except Exception as e:
        print(f"✗ Failed to load configuration: {e}", file=sys.stderr)
        return 1

    data = settings.model_dump(mode="json")
    print(json.dumps(redact_settings_dict(data), indent=2, default=str))
    return 0


def cmd_show_deprecated(args: argparse.Namespace) -> int:
    """Show deprecated environment variables that are in use."""
    found = []
    for old_name, new_name in _DEPRECATED_ALIASES.items():
        if old_name in os.environ:
            found.append((old_name, new_name, os.environ.get(new_name) is None))

    if not found:
        print("No deprecated environment variables in use.")
        return 0

    print("Deprecated environment variables detected:")
    print()
    for old_name, new_name, needs_migration in found:
        status = "NEEDS MIGRATION" if needs_migration else "has canonical override"
        print(f"  {old_name} → {new_name} ({status})")

    print()
    print("These variables will be removed in a future version.")
    print("Please migrate to the canonical names.")
    return 0


def cmd_subscriptions(args: argparse.Namespace) -> int:
    """Print the /dapr/subscribe payload for the current configuration."""
    try:
        settings = load_settings()
    except Exception as e:
        print(f"✗ Failed to load configuration: {e}", file=sys.stderr)
        return 1

    payload = [s.as_dict() for s in build_subscriptions(settings)]
    print(json.dumps(payload, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="pubsub-subscriber-cli",
        description="pubsub-subscriber CLI utilities",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser(
        "validate-config",
        help="Validate configuration and exit",
    )
    validate_parser.set_defaults(func=cmd_validate_config)

    dump_parser = subparsers.add_parser(
        "dump-config",
        help="Dump configuration as JSON (secrets redacted)",
    )
    dump_parser.set_defaults(func=cmd_dump_config)

    deprecated_parser = subparsers.add_parser(
        "show-deprecated",
        help="Show deprecated environment variables in use",
    )
    deprecated_parser.set_defaults(func=cmd_show_deprecated)

    subscriptions_parser = subparsers.add_parser(
        "subscriptions",
        help="Print the subscriptions announced on /dapr/subscribe",
    )
    subscriptions_parser.set_defaults(func=cmd_subscriptions)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
