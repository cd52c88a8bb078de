"""Pydantic data models for the tool envelope and protocol framing.

This module defines the data structures shared by every transport:
- The result envelope (ToolResult, TextContent)
- The invocation payload and discovery entries (InvokeRequest, ToolDescriptor)
- JSON-RPC 2.0 request/response framing (JsonRpcRequest, JsonRpcResponse, JsonRpcError)

All models use Pydantic v2 for validation and serialization.
"""

from brightdata_mcp.models.envelope import (
    InvokeRequest,
    TextContent,
    ToolDescriptor,
    ToolResult,
)
from brightdata_mcp.models.rpc import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
)

__all__ = [
    # Envelope models
    "TextContent",
    "ToolResult",
    "InvokeRequest",
    "ToolDescriptor",
    # JSON-RPC models
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
]
