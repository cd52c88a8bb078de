"""Built-in web-data tools.

Each tool implements the Tool capability from tools.base:
- search_web: Search engine results pages
- scrape_website: Single page as markdown or raw HTML
- extract_data: Structured fields from a page
- take_screenshot: PNG screenshot of a page
- multi_zone_search: One search fanned out across zones

router.py exposes the registered tools on a FastMCP server.
"""

from __future__ import annotations

from brightdata_mcp.providers import WebDataProvider
from brightdata_mcp.tools.base import Tool
from brightdata_mcp.tools.extract import ExtractDataTool
from brightdata_mcp.tools.multi_zone_search import MultiZoneSearchTool
from brightdata_mcp.tools.scrape import ScrapeWebsiteTool
from brightdata_mcp.tools.screenshot import TakeScreenshotTool
from brightdata_mcp.tools.search import SearchWebTool


def build_default_tools(provider: WebDataProvider) -> list[Tool]:
    """Instantiate the built-in tools in registration order."""
    search = SearchWebTool(provider)
    return [
        search,
        ScrapeWebsiteTool(provider),
        ExtractDataTool(provider),
        TakeScreenshotTool(provider),
        MultiZoneSearchTool(search),
    ]


__all__ = [
    "Tool",
    "SearchWebTool",
    "ScrapeWebsiteTool",
    "ExtractDataTool",
    "TakeScreenshotTool",
    "MultiZoneSearchTool",
    "build_default_tools",
]
