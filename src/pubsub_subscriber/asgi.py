from __future__ import annotations

from pubsub_subscriber.app.server import create_app
from pubsub_subscriber.config.load import load_settings
from pubsub_subscriber.observability.logger import configure_logging

settings = load_settings()
configure_logging(settings.observability)

app = create_app(settings)
