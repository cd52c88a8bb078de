"""HTTP transports over the shared dispatcher.

Each transport is a thin translation layer:
- rest.py: /health, /tools, /invoke and /api/stats
- sse.py: /sse, one dispatch framed as Server-Sent Events
- jsonrpc.py: /mcp, JSON-RPC 2.0 framing for MCP clients
"""

from brightdata_mcp.transports.jsonrpc import handle_message, mcp_endpoint
from brightdata_mcp.transports.rest import api_stats, health_check, invoke_tool, list_tools
from brightdata_mcp.transports.sse import dispatch_events, sse_invoke

__all__ = [
    "api_stats",
    "health_check",
    "invoke_tool",
    "list_tools",
    "sse_invoke",
    "dispatch_events",
    "mcp_endpoint",
    "handle_message",
]
