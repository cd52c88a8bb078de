"""Transport-agnostic dispatch: authenticate, resolve, rate-check, execute."""

from __future__ import annotations

import hmac
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from brightdata_mcp import metrics as m
from brightdata_mcp.core.rate_limiter import RateLimiter
from brightdata_mcp.core.resolver import ToolResolver
from brightdata_mcp.errors import (
    RateLimitedError,
    RateLimitExceeded,
    ToolError,
    ToolExecutionFailedError,
    UnauthorizedError,
    UnknownToolError,
)
from brightdata_mcp.metrics import ServerMetrics, get_metrics
from brightdata_mcp.models.envelope import ToolDescriptor, ToolResult
from brightdata_mcp.tools.base import Tool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Credentials presented by the caller."""

    token: str | None = None

    @classmethod
    def from_authorization_header(cls, header: str | None) -> AuthContext:
        """Parse an ``Authorization: Bearer <token>`` header value."""
        if not header:
            return cls()
        scheme, _, token = header.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return cls()
        return cls(token=token.strip())


class Dispatcher:
    """Single code path shared by the CLI, REST, SSE and JSON-RPC transports.

    Each request moves through authenticate -> resolve -> rate check ->
    execute and stops at the first failure. Authentication, unknown tools
    and rate limiting raise ``DispatchError`` subclasses. Tool failures are
    recovered into an error envelope so callers always get parseable content.
    """

    def __init__(
        self,
        resolver: ToolResolver,
        rate_limiter: RateLimiter,
        auth_token: str | None = None,
        metrics: ServerMetrics | None = None,
    ) -> None:
        self.resolver = resolver
        self.rate_limiter = rate_limiter
        self.auth_token = auth_token or None
        self.metrics = metrics or get_metrics()

    @property
    def auth_required(self) -> bool:
        return self.auth_token is not None

    def authenticate(self, auth: AuthContext | None) -> None:
        """Raise UnauthorizedError unless the caller's token matches."""
        if self.auth_token is None:
            return
        supplied = (auth.token if auth else None) or ""
        if not hmac.compare_digest(supplied.encode(), self.auth_token.encode()):
            raise UnauthorizedError()

    def list_tools(self) -> list[str]:
        return self.resolver.list()

    def describe_tools(self) -> list[ToolDescriptor]:
        return self.resolver.descriptors()

    async def dispatch(
        self,
        tool_name: str,
        parameters: Mapping[str, Any] | None = None,
        auth: AuthContext | None = None,
    ) -> ToolResult:
        """Run a tool by name.

        Args:
            tool_name: Registered tool name (case-sensitive)
            parameters: Free-form parameter map, passed to the tool unchanged
            auth: Caller credentials

        Returns:
            The tool's ToolResult on success, or an error envelope when the
            tool itself failed

        Raises:
            UnauthorizedError: If a token is configured and does not match
            UnknownToolError: If no tool has that name
            RateLimitedError: If the tool's window is exhausted
        """
        try:
            self.authenticate(auth)
        except UnauthorizedError as e:
            logger.warning(f"Rejected unauthenticated call to {tool_name}")
            self.metrics.record(tool_name, m.UNAUTHORIZED, error=str(e))
            raise

        tool = self.resolver.resolve(tool_name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {tool_name}")
            error = UnknownToolError(tool_name)
            self.metrics.record(tool_name, m.UNKNOWN_TOOL, error=str(error))
            raise error

        try:
            self.rate_limiter.check_and_record(tool_name)
        except RateLimitExceeded as e:
            limited = RateLimitedError(tool_name, e.retry_after)
            logger.warning(str(limited))
            self.metrics.record(tool_name, m.RATE_LIMITED, error=str(limited))
            raise limited from e

        started = time.perf_counter()
        try:
            result = await self._execute(tool_name, tool, parameters or {})
        except ToolExecutionFailedError as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.warning(str(e))
            self.metrics.record(tool_name, m.FAILED, elapsed_ms, error=e.cause.message)
            return e.to_result()

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Tool {tool_name} succeeded in {elapsed_ms:.0f}ms")
        self.metrics.record(tool_name, m.SUCCEEDED, elapsed_ms)
        return result

    @staticmethod
    async def _execute(tool_name: str, tool: Tool, parameters: Mapping[str, Any]) -> ToolResult:
        try:
            return await tool.execute(parameters)
        except ToolError as e:
            raise ToolExecutionFailedError(tool_name, e) from e
