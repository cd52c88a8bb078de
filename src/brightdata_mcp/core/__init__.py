"""Dispatch core: tool registry, rate limiting and the shared dispatch path.

The core is the single place every transport goes through:
- ToolResolver maps tool names to tool instances
- RateLimiter gates each tool with a per-name fixed window
- Dispatcher authenticates, resolves, rate-checks and executes

build_dispatcher wires them from the loaded settings at startup.
"""

from brightdata_mcp.core.dispatcher import AuthContext, Dispatcher
from brightdata_mcp.core.factory import build_dispatcher
from brightdata_mcp.core.rate_limiter import RateLimiter
from brightdata_mcp.core.resolver import ToolResolver

__all__ = [
    "AuthContext",
    "Dispatcher",
    "RateLimiter",
    "ToolResolver",
    "build_dispatcher",
]
