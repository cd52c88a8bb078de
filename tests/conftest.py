"""Pytest configuration and fixtures for brightdata-mcp tests."""

from __future__ import annotations

from typing import Any

import pytest

from brightdata_mcp.config import Settings
from brightdata_mcp.core import Dispatcher, RateLimiter, ToolResolver
from brightdata_mcp.errors import UpstreamFailureError
from brightdata_mcp.metrics import ServerMetrics
from brightdata_mcp.providers import UpstreamResponse, WebDataProvider
from brightdata_mcp.tools import build_default_tools


class FakeProvider(WebDataProvider):
    """In-memory provider that records calls and replays canned bodies."""

    def __init__(
        self,
        body: bytes | str = b"<html><body><h1>Fake</h1></body></html>",
        content_type: str = "text/html",
        status_code: int = 200,
        error: UpstreamFailureError | None = None,
    ) -> None:
        self.body = body.encode() if isinstance(body, str) else body
        self.content_type = content_type
        self.status_code = status_code
        self.error = error
        self.failing_zones: set[str] = set()
        self.calls: list[dict[str, Any]] = []

    def _respond(self, url: str) -> UpstreamResponse:
        if self.error is not None:
            raise self.error
        return UpstreamResponse(
            url=url,
            status_code=self.status_code,
            content_type=self.content_type,
            body=self.body,
        )

    async def request(
        self,
        url: str,
        *,
        data_format: str | None = None,
        zone: str | None = None,
    ) -> UpstreamResponse:
        self.calls.append({"method": "request", "url": url, "data_format": data_format, "zone": zone})
        if zone in self.failing_zones:
            raise UpstreamFailureError(f"zone {zone} is not active", status_code=403)
        return self._respond(url)

    async def fetch_via_proxy(self, url: str) -> UpstreamResponse:
        self.calls.append({"method": "fetch_via_proxy", "url": url})
        return self._respond(url)


@pytest.fixture
def settings() -> Settings:
    """Settings with a token and no client auth."""
    return Settings(api_token="test-token")


@pytest.fixture
def make_provider() -> type[FakeProvider]:
    """Build fake providers with custom bodies or failures."""
    return FakeProvider


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def metrics() -> ServerMetrics:
    """Fresh metrics so tests never share counters."""
    return ServerMetrics()


@pytest.fixture
def make_dispatcher(fake_provider: FakeProvider, metrics: ServerMetrics):
    """Factory for dispatchers over the built-in tools and the fake provider."""

    def _make(
        max_requests: int = 10,
        window_seconds: float = 60.0,
        auth_token: str | None = None,
        clock=None,
    ) -> Dispatcher:
        resolver = ToolResolver(build_default_tools(fake_provider)).freeze()
        if clock is None:
            limiter = RateLimiter(max_requests, window_seconds)
        else:
            limiter = RateLimiter(max_requests, window_seconds, clock=clock)
        return Dispatcher(resolver, limiter, auth_token=auth_token, metrics=metrics)

    return _make


@pytest.fixture
def dispatcher(make_dispatcher) -> Dispatcher:
    return make_dispatcher()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def article_html() -> str:
    """A news-style article page."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="description" content="Quarterly results for the widget market">
        <meta property="og:title" content="Widget Market Report">
        <title>Widget Market Report</title>
        <script>window.tracker = 'should be stripped';</script>
        <style>.ad { display: none; }</style>
    </head>
    <body>
        <h1>Widget Market Report</h1>
        <p>Sales grew by <strong>12%</strong> this <em>quarter</em>.</p>
        <h2>Regional Breakdown</h2>
        <ul>
            <li><a href="https://example.com/emea">EMEA figures</a></li>
            <li><a href="/apac" title="Asia Pacific">APAC figures</a></li>
            <li><a href="#methodology">Methodology</a></li>
        </ul>
        <h3>Outlook</h3>
        <h4>Footnotes</h4>
        <div><p>Figures are unaudited.</p></div>
        <noscript>Enable JavaScript for charts</noscript>
    </body>
    </html>
    """


@pytest.fixture
def short_html() -> str:
    return """
    <html>
    <head><title>Short Page</title></head>
    <body>
        <h1>Hello Widgets</h1>
        <p>Only one paragraph here.</p>
    </body>
    </html>
    """


@pytest.fixture
def links_html() -> str:
    return """
    <html>
    <body>
        <a href="https://example.com">Home</a>
        <a href="https://example.com/pricing" title="Pricing Page">Pricing</a>
        <a href="/docs/start">Docs</a>
        <a href="#top">Back to top</a>
        <a href="mailto:sales@example.com">Contact sales</a>
        <a>No destination</a>
    </body>
    </html>
    """


@pytest.fixture
def meta_html() -> str:
    return """
    <html>
    <head>
        <title>Meta Page</title>
        <meta name="description" content="Meta description">
        <meta name="keywords" content="widgets, pricing">
        <meta property="og:title" content="OG Meta Page">
        <meta property="og:image" content="https://example.com/card.png">
        <meta name="twitter:card" content="summary_large_image">
    </head>
    <body><h1>Body</h1></body>
    </html>
    """


@pytest.fixture
def product_html() -> str:
    """A product listing page with repeated elements for selector tests."""
    return """
    <html>
    <head><title>Widget Store</title></head>
    <body>
        <nav><a href="/home">Home</a><a href="/cart">Cart</a></nav>
        <main class="catalog">
            <div class="product">
                <h2 class="name">Blue Widget</h2>
                <span class="price">$10</span>
                <a href="/products/blue">Details</a>
            </div>
            <div class="product">
                <h2 class="name">Red Widget</h2>
                <span class="price">$12</span>
                <a href="/products/red">Details</a>
            </div>
        </main>
        <footer><p>Prices include tax.</p></footer>
    </body>
    </html>
    """
