"""Startup wiring of provider, tools, registry, rate limiter and dispatcher."""

from __future__ import annotations

import logging

from brightdata_mcp.config import Settings
from brightdata_mcp.core.dispatcher import Dispatcher
from brightdata_mcp.core.rate_limiter import RateLimiter
from brightdata_mcp.core.resolver import ToolResolver
from brightdata_mcp.metrics import ServerMetrics
from brightdata_mcp.providers import BrightDataProvider, WebDataProvider
from brightdata_mcp.tools import build_default_tools

logger = logging.getLogger(__name__)


def build_dispatcher(
    settings: Settings,
    provider: WebDataProvider | None = None,
    metrics: ServerMetrics | None = None,
) -> Dispatcher:
    """Build the process-wide dispatcher.

    Args:
        settings: Loaded configuration
        provider: Upstream provider (default: BrightDataProvider from settings)
        metrics: Metrics collector (default: the global instance)

    Returns:
        Dispatcher over a frozen registry of the built-in tools

    Raises:
        DuplicateToolNameError: If two tools share a name
    """
    provider = provider or BrightDataProvider(settings)
    resolver = ToolResolver(build_default_tools(provider)).freeze()
    rate_limiter = RateLimiter(settings.rate_limit_requests, settings.rate_limit_window)

    logger.info(
        f"Registered {len(resolver)} tools ({', '.join(resolver.list())}); "
        f"rate limit {settings.rate_limit_requests}/{settings.rate_limit_window:g}s per tool"
    )

    return Dispatcher(resolver, rate_limiter, auth_token=settings.auth_token, metrics=metrics)
