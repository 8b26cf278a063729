from __future__ import annotations

import re
import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from pubsub_subscriber.app.constants import REQUEST_ID_HEADER

# Broker sidecars and test harnesses send ids like UUIDs or "trace:span" pairs.
_ACCEPTED_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]{1,128}")

log = structlog.get_logger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


def incoming_request_id(request: Request) -> str:
    """The caller's `X-Request-Id` when it is well formed, else a fresh uuid4."""
    candidate = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if _ACCEPTED_REQUEST_ID.fullmatch(candidate):
        return candidate
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Tag every log line emitted while serving a request with its id, method and path.

    Deliveries and `/tests/*` calls are interleaved by the broker, so the path is
    what tells one topic's log lines from another's.
    """

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_id = incoming_request_id(request)
        request.state.request_id = request_id

        started = time.perf_counter()
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            response = await call_next(request)
            log.debug(
                "request.completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
