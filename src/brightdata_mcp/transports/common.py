"""Helpers shared by the HTTP transports."""

from __future__ import annotations

import math
from typing import Any

from pydantic import ValidationError
from starlette.requests import Request

from brightdata_mcp.core import AuthContext, Dispatcher
from brightdata_mcp.errors import (
    DispatchError,
    RateLimitedError,
    UnauthorizedError,
    UnknownToolError,
)
from brightdata_mcp.models.envelope import InvokeRequest


class BadRequestError(ValueError):
    """The request body is not a usable invocation payload."""


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def auth_from_request(request: Request) -> AuthContext:
    return AuthContext.from_authorization_header(request.headers.get("Authorization"))


async def read_invoke_request(request: Request) -> InvokeRequest:
    """Parse and validate the invocation payload.

    Raises:
        BadRequestError: If the body is not JSON or fails validation
    """
    try:
        body = await request.json()
    except ValueError as e:
        raise BadRequestError(f"Request body is not valid JSON: {e}") from e
    try:
        return InvokeRequest.model_validate(body)
    except ValidationError as e:
        raise BadRequestError(f"Invalid invocation payload: {e.errors(include_url=False)}") from e


def retry_after_seconds(retry_after: float) -> int:
    """Whole seconds for a Retry-After header, at least one."""
    return max(1, math.ceil(retry_after))


def dispatch_error_status(error: DispatchError) -> int:
    if isinstance(error, UnauthorizedError):
        return 401
    if isinstance(error, UnknownToolError):
        return 404
    if isinstance(error, RateLimitedError):
        return 429
    return 500


def dispatch_error_body(error: DispatchError) -> dict[str, Any]:
    body: dict[str, Any] = {"error": str(error), "status": dispatch_error_status(error)}
    if isinstance(error, RateLimitedError):
        body["retry_after"] = round(error.retry_after, 3)
    return body
