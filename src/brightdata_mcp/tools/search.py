"""Web search through the Bright Data Web Unlocker."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from brightdata_mcp.errors import InvalidParametersError
from brightdata_mcp.models.envelope import ToolResult
from brightdata_mcp.providers import WebDataProvider
from brightdata_mcp.tools.base import Tool, optional_choice, optional_int, require_string

SEARCH_ENGINES = ("google", "bing", "yandex", "duckduckgo")

# Results per page used to turn a page cursor into an offset
PAGE_SIZE = 10


def parse_cursor(parameters: Mapping[str, Any]) -> int:
    """Turn the ``cursor`` parameter into a zero-based page number.

    Integral strings and floats are accepted; fractional, infinite and
    negative values are rejected.
    """
    return optional_int(parameters, "cursor", 0, minimum=0)


def build_search_url(engine: str, query: str, page: int = 0) -> str:
    """Build the results-page URL for a search engine.

    Args:
        engine: One of SEARCH_ENGINES
        query: Raw search query
        page: Zero-based results page

    Returns:
        Fully encoded search URL
    """
    q = quote_plus(query)
    start = page * PAGE_SIZE

    if engine == "yandex":
        return f"https://yandex.com/search/?text={q}&p={page}"
    if engine == "bing":
        return f"https://www.bing.com/search?q={q}&first={start + 1}"
    if engine == "duckduckgo":
        return f"https://duckduckgo.com/?q={q}&s={start}"
    return f"https://www.google.com/search?q={q}&start={start}"


class SearchWebTool(Tool):
    """Search the web with one of the supported engines."""

    name = "search_web"
    description = "Search the web using Google, Bing, Yandex or DuckDuckGo via Bright Data"
    input_schema = {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Search query"},
            "engine": {
                "type": "string",
                "enum": list(SEARCH_ENGINES),
                "description": "Search engine to use",
                "default": "google",
            },
            "cursor": {
                "type": "string",
                "description": "Pagination cursor (page number)",
                "default": "0",
            },
        },
        "required": ["query"],
    }

    def __init__(self, provider: WebDataProvider) -> None:
        self.provider = provider

    async def execute(self, parameters: Mapping[str, Any]) -> ToolResult:
        query = require_string(parameters, "query")
        engine = optional_choice(parameters, "engine", SEARCH_ENGINES, "google")
        page = parse_cursor(parameters)
        zone = parameters.get("zone")
        if zone is not None and not isinstance(zone, str):
            raise InvalidParametersError("zone", "must be a string")

        search_url = build_search_url(engine, query, page)
        response = await self.provider.request(search_url, data_format="markdown", zone=zone)

        content = response.text or "No results"
        raw = {
            "content": response.text,
            "query": query,
            "engine": engine,
            "page": page,
            "search_url": search_url,
        }
        return ToolResult.success(f"Search results for '{query}' ({engine})\n\n{content}", raw)
