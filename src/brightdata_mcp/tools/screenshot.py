"""Webpage screenshots rendered by Bright Data."""

from __future__ import annotations

import base64
from collections.abc import Mapping
from typing import Any

from brightdata_mcp.errors import UpstreamFailureError
from brightdata_mcp.models.envelope import ToolResult
from brightdata_mcp.providers import WebDataProvider
from brightdata_mcp.tools.base import Tool, optional_bool, optional_int, require_url

MIN_WIDTH, MAX_WIDTH, DEFAULT_WIDTH = 320, 1920, 1280
MIN_HEIGHT, MAX_HEIGHT, DEFAULT_HEIGHT = 240, 1080, 720


class TakeScreenshotTool(Tool):
    """Capture a PNG screenshot of a webpage."""

    name = "take_screenshot"
    description = "Take a screenshot of a webpage using Bright Data"
    input_schema = {
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "The URL to screenshot"},
            "width": {
                "type": "integer",
                "description": "Screenshot width",
                "default": DEFAULT_WIDTH,
                "minimum": MIN_WIDTH,
                "maximum": MAX_WIDTH,
            },
            "height": {
                "type": "integer",
                "description": "Screenshot height",
                "default": DEFAULT_HEIGHT,
                "minimum": MIN_HEIGHT,
                "maximum": MAX_HEIGHT,
            },
            "full_page": {
                "type": "boolean",
                "description": "Capture full page height",
                "default": False,
            },
        },
        "required": ["url"],
    }

    def __init__(self, provider: WebDataProvider) -> None:
        self.provider = provider

    async def execute(self, parameters: Mapping[str, Any]) -> ToolResult:
        url = require_url(parameters)
        width = optional_int(parameters, "width", DEFAULT_WIDTH, MIN_WIDTH, MAX_WIDTH)
        height = optional_int(parameters, "height", DEFAULT_HEIGHT, MIN_HEIGHT, MAX_HEIGHT)
        full_page = optional_bool(parameters, "full_page")

        response = await self.provider.request(url, data_format="screenshot")
        if not response.body:
            raise UpstreamFailureError("Bright Data returned an empty screenshot")

        media_type = (response.content_type or "image/png").split(";")[0].strip()
        raw = {
            "url": url,
            "media_type": media_type,
            "screenshot_data": base64.b64encode(response.body).decode("ascii"),
            "size_bytes": len(response.body),
            "viewport": {"width": width, "height": height, "full_page": full_page},
        }
        return ToolResult.success(
            f"Screenshot captured from {url} ({len(response.body)} bytes, {media_type}). "
            "Image data is available base64-encoded in raw_value.screenshot_data",
            raw,
        )
