"""MCP tool definitions delegating to the shared dispatcher."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError as MCPToolError

from brightdata_mcp.core import AuthContext, Dispatcher
from brightdata_mcp.errors import DispatchError


async def call_through_dispatcher(
    dispatcher: Dispatcher, auth: AuthContext, tool_name: str, parameters: dict[str, Any]
) -> str:
    """Dispatch a tool and return its text content for FastMCP.

    Raises:
        MCPToolError: If the dispatch is rejected or the tool failed, so
            FastMCP reports the call with isError set
    """
    try:
        result = await dispatcher.dispatch(tool_name, parameters, auth)
    except DispatchError as e:
        raise MCPToolError(str(e)) from e

    text = "\n\n".join(result.texts())
    if result.is_error:
        raise MCPToolError(text)
    return text


def register_dispatch_tools(
    mcp: FastMCP, dispatcher: Dispatcher, auth: AuthContext | None = None
) -> None:
    """Register the built-in tools on a FastMCP server.

    Args:
        mcp: FastMCP server instance to register tools on
        dispatcher: Dispatcher every tool call goes through
        auth: Credentials to present for local (stdio) callers
    """
    auth = auth or AuthContext()
    registered = set(dispatcher.list_tools())

    async def search_web(query: str, engine: str = "google", cursor: str = "0") -> str:
        """Search the web using Google, Bing, Yandex or DuckDuckGo via Bright Data.

        Args:
            query: Search query
            engine: Search engine (google, bing, yandex, duckduckgo)
            cursor: Pagination cursor (page number)
        """
        return await call_through_dispatcher(
            dispatcher, auth, "search_web", {"query": query, "engine": engine, "cursor": cursor}
        )

    async def scrape_website(url: str, format: str = "markdown") -> str:
        """Scrape a webpage and return markdown or raw HTML.

        Args:
            url: The URL to scrape (must be http:// or https://)
            format: Output format (markdown or raw)
        """
        return await call_through_dispatcher(
            dispatcher, auth, "scrape_website", {"url": url, "format": format}
        )

    async def extract_data(
        url: str, schema: dict[str, str] | None = None, format: str = "json"
    ) -> str:
        """Extract structured data from a webpage.

        Args:
            url: The URL to extract data from
            schema: Optional mapping of field name to CSS selector
            format: Output format (json or markdown)
        """
        parameters: dict[str, Any] = {"url": url, "format": format}
        if schema:
            parameters["schema"] = schema
        return await call_through_dispatcher(dispatcher, auth, "extract_data", parameters)

    async def take_screenshot(
        url: str, width: int = 1280, height: int = 720, full_page: bool = False
    ) -> str:
        """Take a screenshot of a webpage using Bright Data.

        Args:
            url: The URL to screenshot
            width: Screenshot width (320-1920)
            height: Screenshot height (240-1080)
            full_page: Capture full page height
        """
        return await call_through_dispatcher(
            dispatcher,
            auth,
            "take_screenshot",
            {"url": url, "width": width, "height": height, "full_page": full_page},
        )

    async def multi_zone_search(query: str, zones: list[str], engine: str = "google") -> str:
        """Perform the same search query across multiple Bright Data zones in parallel.

        Args:
            query: Search query
            zones: Bright Data zone names
            engine: Search engine (google, bing, yandex, duckduckgo)
        """
        return await call_through_dispatcher(
            dispatcher,
            auth,
            "multi_zone_search",
            {"query": query, "zones": zones, "engine": engine},
        )

    # Only tools present in the registry are exposed
    for fn in (search_web, scrape_website, extract_data, take_screenshot, multi_zone_search):
        if fn.__name__ in registered:
            mcp.tool()(fn)
