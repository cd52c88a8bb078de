"""Server-Sent Events framing of a single dispatch."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse

from brightdata_mcp.core import AuthContext, Dispatcher
from brightdata_mcp.errors import DispatchError
from brightdata_mcp.transports.common import (
    BadRequestError,
    auth_from_request,
    dispatch_error_body,
    get_dispatcher,
    read_invoke_request,
)

logger = logging.getLogger(__name__)

SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def format_event(event: str, data: Any) -> str:
    """Frame one SSE event with a JSON data line."""
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"


async def dispatch_events(
    dispatcher: Dispatcher,
    tool_name: str,
    parameters: dict[str, Any],
    auth: AuthContext,
) -> AsyncIterator[str]:
    """Yield an ``accepted`` event, then exactly one terminal event.

    The terminal event is ``result`` carrying the envelope, or ``error``
    carrying the protocol-level failure.
    """
    yield format_event("accepted", {"tool": tool_name})
    try:
        result = await dispatcher.dispatch(tool_name, parameters, auth)
    except DispatchError as e:
        yield format_event("error", dispatch_error_body(e))
        return
    except Exception as e:
        logger.exception(f"Unhandled error while streaming {tool_name}")
        yield format_event("error", {"error": f"Internal error: {type(e).__name__}", "status": 500})
        return
    yield format_event("result", result.to_envelope())


async def sse_invoke(request: Request) -> Response:
    """Invoke a tool and stream the outcome as Server-Sent Events.

    Returns:
        StreamingResponse of text/event-stream, or 400 JSON for a malformed payload
    """
    try:
        payload = await read_invoke_request(request)
    except BadRequestError as e:
        return JSONResponse({"error": str(e), "status": 400}, status_code=400)

    events = dispatch_events(
        get_dispatcher(request), payload.tool, payload.parameters, auth_from_request(request)
    )
    return StreamingResponse(events, media_type="text/event-stream", headers=SSE_HEADERS)
