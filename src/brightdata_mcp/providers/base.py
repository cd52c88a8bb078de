"""Base provider interface for the upstream web-data backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class UpstreamResponse:
    """Response from a single upstream provider call."""

    url: str
    status_code: int
    content_type: str | None
    body: bytes
    elapsed_ms: float | None = None
    attempts: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class WebDataProvider(ABC):
    """Abstract base class for web-data providers."""

    @abstractmethod
    async def request(
        self,
        url: str,
        *,
        data_format: str | None = None,
        zone: str | None = None,
    ) -> UpstreamResponse:
        """Fetch a URL through the provider's unlocking API.

        Args:
            url: The target URL
            data_format: Optional provider-side conversion (markdown, screenshot)
            zone: Zone to bill the request to (default: the configured zone)

        Returns:
            UpstreamResponse with the provider's body

        Raises:
            UpstreamFailureError: If the call fails or returns a non-success status
        """

    @abstractmethod
    async def fetch_via_proxy(self, url: str) -> UpstreamResponse:
        """Fetch a URL as a plain GET routed through the provider's proxy.

        Args:
            url: The target URL

        Returns:
            UpstreamResponse with the target page's body

        Raises:
            UpstreamFailureError: If the call fails or returns a non-success status
        """
