"""Upstream providers the tools delegate their network work to."""

from brightdata_mcp.providers.base import UpstreamResponse, WebDataProvider
from brightdata_mcp.providers.brightdata_provider import BrightDataProvider

__all__ = ["WebDataProvider", "UpstreamResponse", "BrightDataProvider"]
