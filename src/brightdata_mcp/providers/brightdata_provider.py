"""Bright Data provider using the requests library."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import requests

from brightdata_mcp.config import Settings
from brightdata_mcp.errors import UpstreamFailureError
from brightdata_mcp.providers.base import UpstreamResponse, WebDataProvider

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

# Upstream bodies quoted in error messages are cut to this many characters
ERROR_BODY_LIMIT = 500


class BrightDataProvider(WebDataProvider):
    """Web Unlocker and proxy client with bounded timeouts and optional retries."""

    def __init__(
        self,
        settings: Settings,
        retry_delay: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            settings: Loaded configuration (token, base URL, zones, proxy, timeout)
            retry_delay: Initial delay between retries in seconds (default: 1.0)
            session: Optional pre-built requests session
        """
        self.settings = settings
        self.timeout = settings.request_timeout
        self.max_retries = settings.max_retries
        self.retry_delay = retry_delay
        self.session = session or requests.Session()

        logger.info(
            f"BrightDataProvider initialized (base_url={settings.base_url}, "
            f"zone={settings.web_unlocker_zone}, timeout={self.timeout}s, "
            f"proxy={'enabled' if settings.proxy_url else 'disabled'})"
        )

    @property
    def request_endpoint(self) -> str:
        return f"{self.settings.base_url}/request"

    def build_payload(
        self, url: str, data_format: str | None = None, zone: str | None = None
    ) -> dict[str, Any]:
        """Build the Web Unlocker request body."""
        payload: dict[str, Any] = {
            "url": url,
            "zone": zone or self.settings.web_unlocker_zone,
            "format": "raw",
        }
        if data_format:
            payload["data_format"] = data_format
        return payload

    async def request(
        self,
        url: str,
        *,
        data_format: str | None = None,
        zone: str | None = None,
    ) -> UpstreamResponse:
        if not self.settings.api_token:
            raise UpstreamFailureError("Missing BRIGHTDATA_API_TOKEN")

        payload = self.build_payload(url, data_format, zone)
        headers = {
            "Authorization": f"Bearer {self.settings.api_token}",
            "Content-Type": "application/json",
        }

        def send() -> requests.Response:
            return self.session.post(
                self.request_endpoint, json=payload, headers=headers, timeout=self.timeout
            )

        return await self._perform(url, send)

    async def fetch_via_proxy(self, url: str) -> UpstreamResponse:
        proxy_url = self.settings.proxy_url
        if proxy_url is None:
            logger.debug(f"No proxy credentials configured, using Web Unlocker for {url}")
            return await self.request(url)

        proxies = {"http": proxy_url, "https": proxy_url}
        headers = {"User-Agent": USER_AGENT}

        def send() -> requests.Response:
            return self.session.get(url, headers=headers, proxies=proxies, timeout=self.timeout)

        return await self._perform(url, send)

    async def _perform(self, url: str, send: Callable[[], requests.Response]) -> UpstreamResponse:
        """Run a blocking send callable in the executor with retry and error mapping."""
        attempt = 0

        while True:
            try:
                # Run requests in thread pool to avoid blocking
                loop = asyncio.get_event_loop()
                response = await loop.run_in_executor(None, send)
            except requests.Timeout as e:
                error: UpstreamFailureError = UpstreamFailureError(
                    f"Upstream request timed out after {self.timeout}s: {e}"
                )
                retryable = True
            except requests.ConnectionError as e:
                error = UpstreamFailureError(f"Upstream connection failed: {e}")
                retryable = True
            except requests.RequestException as e:
                raise UpstreamFailureError(f"Upstream request failed: {e}") from e
            else:
                if response.ok:
                    return UpstreamResponse(
                        url=url,
                        status_code=response.status_code,
                        content_type=response.headers.get("Content-Type"),
                        body=response.content,
                        elapsed_ms=response.elapsed.total_seconds() * 1000,
                        attempts=attempt + 1,
                    )

                body = response.text[:ERROR_BODY_LIMIT]
                error = UpstreamFailureError(
                    f"Bright Data API error {response.status_code}: {body}",
                    status_code=response.status_code,
                )
                retryable = response.status_code >= 500

            attempt += 1
            if not retryable or attempt > self.max_retries:
                logger.warning(f"Upstream call for {url} failed: {error.message}")
                raise error

            # Exponential backoff
            delay = self.retry_delay * (2 ** (attempt - 1))
            logger.debug(
                f"Retry attempt {attempt}/{self.max_retries} for {url} after {delay:.2f}s delay"
            )
            await asyncio.sleep(delay)
