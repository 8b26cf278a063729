from __future__ import annotations

import uvicorn

from pubsub_subscriber.app.server import create_app
from pubsub_subscriber.config.load import load_settings
from pubsub_subscriber.observability.logger import configure_logging


def main() -> int:
    settings = load_settings()
    configure_logging(settings.observability)

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )
    return 0
