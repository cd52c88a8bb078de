"""Run one search across several Bright Data zones concurrently."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from brightdata_mcp.errors import InvalidParametersError, ToolError
from brightdata_mcp.models.envelope import ToolResult
from brightdata_mcp.tools.base import Tool, optional_choice, optional_string_list, require_string
from brightdata_mcp.tools.search import SEARCH_ENGINES, SearchWebTool

# Default concurrency limit for per-zone searches
DEFAULT_CONCURRENCY = 4

# Upper bound on upstream searches a single call may fan out to
MAX_ZONES = 10


class MultiZoneSearchTool(Tool):
    """Fan the same query out to several zones and collect every answer."""

    name = "multi_zone_search"
    description = "Perform the same search query across multiple Bright Data zones in parallel"
    input_schema = {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Search query"},
            "engine": {
                "type": "string",
                "enum": list(SEARCH_ENGINES),
                "default": "google",
            },
            "zones": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Bright Data zone names to search in parallel",
                "minItems": 1,
                "maxItems": MAX_ZONES,
            },
        },
        "required": ["query", "zones"],
    }

    def __init__(self, search: SearchWebTool, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        self.search = search
        self.concurrency = concurrency

    async def _search_zone(
        self, zone: str, query: str, engine: str, semaphore: asyncio.Semaphore
    ) -> tuple[str, ToolResult | None, str | None]:
        async with semaphore:
            try:
                result = await self.search.execute({"query": query, "engine": engine, "zone": zone})
            except ToolError as e:
                return zone, None, e.message
            return zone, result, None

    async def execute(self, parameters: Mapping[str, Any]) -> ToolResult:
        query = require_string(parameters, "query")
        engine = optional_choice(parameters, "engine", SEARCH_ENGINES, "google")
        zones = optional_string_list(parameters, "zones")
        if zones is None:
            raise InvalidParametersError("zones", "is required")
        # Duplicates collapse onto the first occurrence
        zones = list(dict.fromkeys(zone for zone in zones if zone.strip()))
        if not zones:
            raise InvalidParametersError("zones", "must name at least one zone")
        if len(zones) > MAX_ZONES:
            raise InvalidParametersError("zones", f"must name at most {MAX_ZONES} zones")

        semaphore = asyncio.Semaphore(self.concurrency)
        outcomes = await asyncio.gather(
            *(self._search_zone(zone, query, engine, semaphore) for zone in zones)
        )

        blocks: list[str] = []
        raw: dict[str, Any] = {"query": query, "engine": engine, "zones": {}}
        for zone, result, error in outcomes:
            if result is None:
                blocks.append(f"[{zone}] failed: {error}")
                raw["zones"][zone] = {"success": False, "error": error}
            else:
                blocks.extend(f"[{zone}]\n{text}" for text in result.texts())
                raw["zones"][zone] = {"success": True, "result": result.raw_value}

        raw["successful"] = sum(1 for _, result, _ in outcomes if result is not None)
        raw["failed"] = len(outcomes) - raw["successful"]
        return ToolResult.from_blocks(blocks, raw)
