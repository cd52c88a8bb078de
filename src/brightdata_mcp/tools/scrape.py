"""Single-page scraping through the Bright Data Web Unlocker."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from brightdata_mcp.models.envelope import ToolResult
from brightdata_mcp.providers import WebDataProvider
from brightdata_mcp.tools.base import Tool, optional_choice, require_url

SCRAPE_FORMATS = ("markdown", "raw")


class ScrapeWebsiteTool(Tool):
    """Scrape a webpage as markdown or raw HTML."""

    name = "scrape_website"
    description = "Scrape a webpage and return markdown or raw HTML using Bright Data Web Unlocker"
    input_schema = {
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "The URL to scrape"},
            "format": {
                "type": "string",
                "enum": list(SCRAPE_FORMATS),
                "description": "Output format",
                "default": "markdown",
            },
        },
        "required": ["url"],
    }

    def __init__(self, provider: WebDataProvider) -> None:
        self.provider = provider

    async def execute(self, parameters: Mapping[str, Any]) -> ToolResult:
        url = require_url(parameters)
        output_format = optional_choice(parameters, "format", SCRAPE_FORMATS, "markdown")

        data_format = "markdown" if output_format == "markdown" else None
        response = await self.provider.request(url, data_format=data_format)

        raw = {
            "content": response.text,
            "url": url,
            "format": output_format,
            "status_code": response.status_code,
            "content_type": response.content_type,
        }
        return ToolResult.success(
            f"Scraped from {url}\n\n{response.text or 'No content'}", raw
        )
