"""Environment-based configuration for the Bright Data MCP gateway."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from brightdata_mcp.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.brightdata.com"
DEFAULT_PROXY_HOST = "zproxy.lum-superproxy.io"
DEFAULT_PROXY_PORT = 22225
DEFAULT_PORT = 8080
DEFAULT_TIMEOUT = 30.0
DEFAULT_RATE_LIMIT_REQUESTS = 10
DEFAULT_RATE_LIMIT_WINDOW = 60.0

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration, loaded once at startup."""

    api_token: str = ""
    base_url: str = DEFAULT_BASE_URL
    web_unlocker_zone: str = "default"
    browser_zone: str = "default_browser"
    proxy_username: str = ""
    proxy_password: str = ""
    proxy_host: str = DEFAULT_PROXY_HOST
    proxy_port: int = DEFAULT_PROXY_PORT
    auth_token: str | None = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    request_timeout: float = DEFAULT_TIMEOUT
    max_retries: int = 0
    rate_limit_requests: int = DEFAULT_RATE_LIMIT_REQUESTS
    rate_limit_window: float = DEFAULT_RATE_LIMIT_WINDOW
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables.

        Raises:
            ConfigError: If a numeric variable cannot be parsed
        """
        settings = cls(
            api_token=os.getenv("BRIGHTDATA_API_TOKEN") or os.getenv("API_TOKEN", ""),
            base_url=os.getenv("BRIGHTDATA_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            web_unlocker_zone=os.getenv("WEB_UNLOCKER_ZONE", "default"),
            browser_zone=os.getenv("BROWSER_ZONE", "default_browser"),
            proxy_username=os.getenv("BRIGHTDATA_PROXY_USERNAME", ""),
            proxy_password=os.getenv("BRIGHTDATA_PROXY_PASSWORD", ""),
            proxy_host=os.getenv("BRIGHTDATA_PROXY_HOST", DEFAULT_PROXY_HOST),
            proxy_port=_env_int("BRIGHTDATA_PROXY_PORT", DEFAULT_PROXY_PORT, minimum=1),
            auth_token=os.getenv("MCP_AUTH_TOKEN") or None,
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", DEFAULT_PORT, minimum=1),
            request_timeout=_env_float("REQUEST_TIMEOUT", DEFAULT_TIMEOUT),
            max_retries=_env_int("MAX_RETRIES", 0),
            rate_limit_requests=_env_int(
                "RATE_LIMIT_REQUESTS", DEFAULT_RATE_LIMIT_REQUESTS, minimum=1
            ),
            rate_limit_window=_env_float("RATE_LIMIT_WINDOW", DEFAULT_RATE_LIMIT_WINDOW),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

        if not settings.api_token:
            logger.warning("No BRIGHTDATA_API_TOKEN configured, upstream calls will fail")
        if settings.auth_required:
            logger.info("Bearer token authentication enabled")

        return settings

    @property
    def auth_required(self) -> bool:
        return bool(self.auth_token)

    @property
    def proxy_url(self) -> str | None:
        """Proxy URL with credentials, or None when no proxy user is configured."""
        if not self.proxy_username:
            return None
        return (
            f"http://{self.proxy_username}:{self.proxy_password}"
            f"@{self.proxy_host}:{self.proxy_port}"
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for an entry point."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
