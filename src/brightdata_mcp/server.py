"""HTTP and MCP server for the Bright Data web-data tools."""

from __future__ import annotations

import logging

import uvicorn
from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route

from brightdata_mcp.config import Settings
from brightdata_mcp.core import AuthContext, Dispatcher, build_dispatcher
from brightdata_mcp.tools.router import register_dispatch_tools
from brightdata_mcp.transports import (
    api_stats,
    health_check,
    invoke_tool,
    list_tools,
    mcp_endpoint,
    sse_invoke,
)

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "A web-data MCP server backed by Bright Data. Provides web search, page "
    "scraping, structured extraction and screenshots."
)


def create_app(settings: Settings | None = None, dispatcher: Dispatcher | None = None) -> Starlette:
    """Build the Starlette application.

    Args:
        settings: Loaded configuration (default: Settings.from_env())
        dispatcher: Pre-built dispatcher (default: built from settings)

    Returns:
        Starlette app exposing /health, /tools, /invoke, /sse, /mcp and /api/stats
    """
    if dispatcher is None:
        dispatcher = build_dispatcher(settings or Settings.from_env())

    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/tools", list_tools, methods=["GET"]),
        Route("/invoke", invoke_tool, methods=["POST"]),
        Route("/sse", sse_invoke, methods=["POST"]),
        Route("/mcp", mcp_endpoint, methods=["POST"]),
        Route("/api/stats", api_stats, methods=["GET"]),
    ]
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )
    ]

    app = Starlette(routes=routes, middleware=middleware)
    app.state.dispatcher = dispatcher
    return app


def create_mcp_server(dispatcher: Dispatcher, auth: AuthContext | None = None) -> FastMCP:
    """Build a FastMCP server whose tools delegate to the dispatcher."""
    mcp = FastMCP("Bright Data MCP", instructions=INSTRUCTIONS)
    register_dispatch_tools(mcp, dispatcher, auth)
    return mcp


def run_server(
    transport: str = "http",
    host: str | None = None,
    port: int | None = None,
    settings: Settings | None = None,
) -> None:
    """Run the server.

    Args:
        transport: 'http' (REST, SSE and JSON-RPC via uvicorn) or 'stdio' (MCP over stdio)
        host: Host to bind to (default: settings.host)
        port: Port to bind to (default: settings.port)
        settings: Loaded configuration (default: Settings.from_env())
    """
    settings = settings or Settings.from_env()
    dispatcher = build_dispatcher(settings)

    if transport == "stdio":
        # Local stdio clients are trusted with the configured token
        mcp = create_mcp_server(dispatcher, AuthContext(token=settings.auth_token))
        mcp.run(transport="stdio")
        return

    if transport != "http":
        raise ValueError(f"Unknown transport: {transport} (expected 'http' or 'stdio')")

    host = host or settings.host
    port = port or settings.port
    logger.info(f"Bright Data MCP HTTP server listening on http://{host}:{port}")
    uvicorn.run(create_app(settings, dispatcher), host=host, port=port, log_level="info")
