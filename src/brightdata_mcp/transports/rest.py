"""REST routes: health, discovery, invocation and stats."""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from brightdata_mcp.errors import DispatchError, RateLimitedError, UnauthorizedError
from brightdata_mcp.transports.common import (
    BadRequestError,
    auth_from_request,
    dispatch_error_body,
    dispatch_error_status,
    get_dispatcher,
    read_invoke_request,
    retry_after_seconds,
)

logger = logging.getLogger(__name__)


def dispatch_error_response(error: DispatchError) -> JSONResponse:
    """Render a protocol-level dispatch failure with its HTTP status."""
    headers = {}
    if isinstance(error, RateLimitedError):
        headers["Retry-After"] = str(retry_after_seconds(error.retry_after))
    if isinstance(error, UnauthorizedError):
        headers["WWW-Authenticate"] = "Bearer"
    return JSONResponse(
        dispatch_error_body(error), status_code=dispatch_error_status(error), headers=headers
    )


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint for container orchestration.

    Returns:
        JSONResponse with status: healthy and uptime
    """
    metrics = get_dispatcher(request).metrics
    return JSONResponse(
        {"status": "healthy", "uptime_seconds": round(metrics.get_uptime_seconds(), 3)}
    )


async def list_tools(request: Request) -> JSONResponse:
    """List registered tool names in registration order.

    Returns:
        JSONResponse with {"tools": [...]}
    """
    return JSONResponse({"tools": get_dispatcher(request).list_tools()})


async def invoke_tool(request: Request) -> JSONResponse:
    """Invoke a tool with the JSON invocation payload.

    Returns:
        JSONResponse with the result envelope (200), or a protocol error
        (400, 401, 404, 429)
    """
    dispatcher = get_dispatcher(request)
    try:
        payload = await read_invoke_request(request)
    except BadRequestError as e:
        return JSONResponse({"error": str(e), "status": 400}, status_code=400)

    try:
        result = await dispatcher.dispatch(
            payload.tool, payload.parameters, auth_from_request(request)
        )
    except DispatchError as e:
        return dispatch_error_response(e)
    except Exception as e:
        logger.exception(f"Unhandled error while invoking {payload.tool}")
        return JSONResponse(
            {"error": f"Internal error: {type(e).__name__}", "status": 500}, status_code=500
        )

    return JSONResponse(result.to_envelope())


async def api_stats(request: Request) -> JSONResponse:
    """Get invocation metrics as JSON.

    Returns:
        JSONResponse with server stats, or 401 when auth is configured and missing
    """
    dispatcher = get_dispatcher(request)
    try:
        dispatcher.authenticate(auth_from_request(request))
    except UnauthorizedError as e:
        return dispatch_error_response(e)
    return JSONResponse(dispatcher.metrics.to_dict())
