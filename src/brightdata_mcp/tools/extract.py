"""Structured data extraction from a fetched page."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from brightdata_mcp.errors import InvalidParametersError
from brightdata_mcp.models.envelope import ToolResult
from brightdata_mcp.providers import WebDataProvider
from brightdata_mcp.tools.base import Tool, optional_choice, optional_mapping, require_url
from brightdata_mcp.utils import (
    extract_headings,
    extract_links,
    extract_metadata,
    html_to_markdown,
    html_to_text,
    select_text,
)

logger = logging.getLogger(__name__)

EXTRACT_FORMATS = ("json", "markdown")

# Length of the plain-text excerpt included in JSON output
TEXT_EXCERPT_CHARS = 2000


class ExtractDataTool(Tool):
    """Fetch a page and turn it into structured fields."""

    name = "extract_data"
    description = (
        "Extract structured data (metadata, headings, links, text and "
        "selector-driven fields) from a webpage"
    )
    input_schema = {
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "The URL to extract data from"},
            "schema": {
                "type": "object",
                "description": "Optional mapping of field name to CSS selector",
                "additionalProperties": {"type": "string"},
            },
            "format": {
                "type": "string",
                "enum": list(EXTRACT_FORMATS),
                "description": "Output format",
                "default": "json",
            },
        },
        "required": ["url"],
    }

    def __init__(self, provider: WebDataProvider) -> None:
        self.provider = provider

    @staticmethod
    def _parse_schema(parameters: Mapping[str, Any]) -> dict[str, str]:
        schema = optional_mapping(parameters, "schema") or {}
        for field_name, selector in schema.items():
            if not isinstance(selector, str) or not selector.strip():
                raise InvalidParametersError(
                    "schema", f"field '{field_name}' must map to a CSS selector string"
                )
            try:
                select_text("<html></html>", selector)
            except ValueError as e:
                raise InvalidParametersError("schema", str(e)) from e
        return schema

    async def execute(self, parameters: Mapping[str, Any]) -> ToolResult:
        url = require_url(parameters)
        schema = self._parse_schema(parameters)
        output_format = optional_choice(parameters, "format", EXTRACT_FORMATS, "json")

        response = await self.provider.fetch_via_proxy(url)
        html = response.text

        fields = {field_name: select_text(html, selector) for field_name, selector in schema.items()}

        links = extract_links(html, base_url=url)
        data: dict[str, Any] = {
            "url": url,
            "metadata": extract_metadata(html),
            "headings": extract_headings(html),
            "links": links,
            "link_count": len(links),
        }
        if schema:
            data["fields"] = fields

        logger.debug(f"Extracted {len(links)} links and {len(fields)} fields from {url}")

        if output_format == "markdown":
            markdown = html_to_markdown(html, strip_tags=["script", "style", "noscript"])
            return ToolResult.success(markdown or "No content", data)

        data["text_excerpt"] = html_to_text(html)[:TEXT_EXCERPT_CHARS]
        return ToolResult.success(json.dumps(data, indent=2, ensure_ascii=False), data)
