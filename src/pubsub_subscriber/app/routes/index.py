from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Request

from pubsub_subscriber._version import __version__
from pubsub_subscriber.app.constants import SERVICE_NAME

router = APIRouter()
log = structlog.get_logger(__name__)


@router.get("/")
def index() -> dict[str, str]:
    log.debug("index.called")
    return {"message": "OK"}


@router.get("/healthz")
def healthz(request: Request) -> dict[str, str]:
    out: dict[str, str] = {"status": "ok", "time": datetime.now(UTC).isoformat()}
    settings = getattr(request.app.state, "settings", None)
    if settings is None or not settings.observability.healthz_omit_version:
        out["service"] = SERVICE_NAME
        out["version"] = __version__
    return out
