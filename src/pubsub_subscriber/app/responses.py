"""Centralized API response helpers for consistent JSON shapes."""

from __future__ import annotations

from collections.abc import Mapping

from starlette.responses import JSONResponse, Response

STATUS_SUCCESS = "SUCCESS"
STATUS_RETRY = "RETRY"
STATUS_DROP = "DROP"


def api_error(
    status_code: int,
    detail: str,
    *,
    code: str | None = None,
    hint: str | None = None,
    request_id: str | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Return a JSON error response with optional code, hint and request id."""
    content: dict[str, str] = {"detail": detail}
    if code is not None:
        content["code"] = code
    if hint is not None:
        content["hint"] = hint
    if request_id is not None:
        content["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def app_response(status: str, message: str, *, status_code: int = 200) -> JSONResponse:
    """Delivery reply understood by the broker: `status` tells it to ack, retry or drop."""
    return JSONResponse(status_code=status_code, content={"status": status, "message": message})


def drop_response(message: str) -> JSONResponse:
    return app_response(STATUS_DROP, message)


def empty_json_response() -> Response:
    return Response(content=b"{}", status_code=200, media_type="application/json")


def empty_response(status_code: int = 200) -> Response:
    return Response(status_code=status_code)
