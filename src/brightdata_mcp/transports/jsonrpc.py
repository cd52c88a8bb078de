"""JSON-RPC 2.0 framing for MCP clients over HTTP."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from brightdata_mcp import __version__
from brightdata_mcp.core import AuthContext, Dispatcher
from brightdata_mcp.errors import (
    DispatchError,
    RateLimitedError,
    UnauthorizedError,
    UnknownToolError,
)
from brightdata_mcp.models.envelope import ToolResult
from brightdata_mcp.models.rpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    RATE_LIMITED,
    UNAUTHORIZED,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
)
from brightdata_mcp.transports.common import auth_from_request, get_dispatcher

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "brightdata-mcp"


def _message_id(message: Any) -> str | int | None:
    request_id = message.get("id") if isinstance(message, dict) else None
    if isinstance(request_id, (str, int)) and not isinstance(request_id, bool):
        return request_id
    return None


def error_response(
    request_id: Any, code: int, message: str, data: Any | None = None
) -> dict[str, Any]:
    return JsonRpcResponse(
        id=request_id, error=JsonRpcError(code=code, message=message, data=data)
    ).to_wire()


def result_response(request_id: Any, result: Any) -> dict[str, Any]:
    return JsonRpcResponse(id=request_id, result=result).to_wire()


def tool_result_payload(result: ToolResult) -> dict[str, Any]:
    """The envelope plus the MCP-standard ``isError`` mirror."""
    payload = result.to_envelope()
    payload["isError"] = result.is_error
    return payload


def dispatch_error_to_rpc(request_id: Any, error: DispatchError) -> dict[str, Any]:
    """Map a protocol-level dispatch failure to a JSON-RPC error object."""
    if isinstance(error, UnknownToolError):
        return error_response(request_id, METHOD_NOT_FOUND, str(error), {"tool": error.name})
    if isinstance(error, RateLimitedError):
        return error_response(
            request_id, RATE_LIMITED, str(error), {"retry_after": round(error.retry_after, 3)}
        )
    if isinstance(error, UnauthorizedError):
        return error_response(request_id, UNAUTHORIZED, str(error))
    return error_response(request_id, INTERNAL_ERROR, str(error))


async def _call_tool(
    dispatcher: Dispatcher, request: JsonRpcRequest, auth: AuthContext
) -> dict[str, Any]:
    params = request.params or {}
    name = params.get("name")
    if not isinstance(name, str) or not name:
        return error_response(request.id, INVALID_PARAMS, "params.name must be a tool name")
    arguments = params.get("arguments") or {}
    if not isinstance(arguments, dict):
        return error_response(request.id, INVALID_PARAMS, "params.arguments must be an object")

    try:
        result = await dispatcher.dispatch(name, arguments, auth)
    except DispatchError as e:
        return dispatch_error_to_rpc(request.id, e)
    return result_response(request.id, tool_result_payload(result))


async def handle_message(
    dispatcher: Dispatcher, message: Any, auth: AuthContext
) -> dict[str, Any] | None:
    """Handle one decoded JSON-RPC message.

    Args:
        dispatcher: Shared dispatcher
        message: Decoded JSON body
        auth: Caller credentials

    Returns:
        The response object, or None for a notification
    """
    request_id = _message_id(message)
    try:
        request = JsonRpcRequest.model_validate(message)
    except ValidationError as e:
        return error_response(
            request_id, INVALID_REQUEST, "Invalid Request", [err["msg"] for err in e.errors()]
        )

    if request.is_notification:
        logger.debug(f"Received notification {request.method}")
        return None

    if request.method == "initialize":
        return result_response(
            request.id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
            },
        )
    if request.method == "ping":
        return result_response(request.id, {})
    if request.method == "tools/list":
        tools = [d.model_dump(mode="json") for d in dispatcher.describe_tools()]
        return result_response(request.id, {"tools": tools})
    if request.method == "tools/call":
        return await _call_tool(dispatcher, request, auth)

    return error_response(request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}")


async def mcp_endpoint(request: Request) -> Response:
    """JSON-RPC endpoint for MCP clients.

    Returns:
        JSONResponse (always HTTP 200) with the JSON-RPC response, or an
        empty 202 for notifications
    """
    try:
        message = json.loads(await request.body())
    except ValueError as e:
        return JSONResponse(error_response(None, PARSE_ERROR, f"Parse error: {e}"))

    try:
        response = await handle_message(get_dispatcher(request), message, auth_from_request(request))
    except Exception as e:
        logger.exception("Unhandled error in JSON-RPC handler")
        request_id = _message_id(message)
        return JSONResponse(
            error_response(request_id, INTERNAL_ERROR, f"Internal error: {type(e).__name__}")
        )

    if response is None:
        return Response(status_code=202)
    return JSONResponse(response)
