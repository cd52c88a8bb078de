"""Exception taxonomy shared by tools, the dispatcher and the transports.

Two families are kept apart on purpose:

- ``ToolError`` subclasses are content-level failures. The dispatcher recovers
  them into a ``ToolResult`` with ``is_error=True``.
- ``DispatchError`` subclasses are protocol-level failures. Transports render
  them with their native convention (HTTP status, JSON-RPC error object).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from brightdata_mcp.models.envelope import ToolResult


class ConfigError(ValueError):
    """Raised when the environment holds an unusable configuration value."""


class ToolError(Exception):
    """Base class for failures raised by a tool's ``execute``."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidParametersError(ToolError):
    """Caller-supplied parameters failed the tool's own validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Invalid parameter '{field}': {message}")
        self.field = field


class UpstreamFailureError(ToolError):
    """The provider call failed, timed out or returned something unusable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DispatchError(Exception):
    """Base class for protocol-level dispatch failures."""


class UnauthorizedError(DispatchError):
    def __init__(self) -> None:
        super().__init__("Unauthorized: missing or invalid bearer token")


class UnknownToolError(DispatchError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class RateLimitedError(DispatchError):
    def __init__(self, tool_name: str, retry_after: float) -> None:
        super().__init__(
            f"Rate limit exceeded for '{tool_name}', retry after {retry_after:.1f}s"
        )
        self.tool_name = tool_name
        self.retry_after = retry_after


class ToolExecutionFailedError(DispatchError):
    """Wraps a ``ToolError``; rendered as an error envelope, never as a protocol error."""

    def __init__(self, tool_name: str, cause: ToolError) -> None:
        super().__init__(f"Tool '{tool_name}' failed: {cause.message}")
        self.tool_name = tool_name
        self.cause = cause

    def to_result(self) -> ToolResult:
        from brightdata_mcp.models.envelope import ToolResult

        return ToolResult.failure(self.cause.message)


class ResolverError(Exception):
    """Raised while building the tool registry."""


class DuplicateToolNameError(ResolverError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Tool already registered: {name}")
        self.name = name


class RateLimitExceeded(Exception):
    """Raised by the rate limiter when a bucket is exhausted."""

    def __init__(self, retry_after: float) -> None:
        super().__init__(f"Rate limit exceeded, retry after {retry_after:.1f}s")
        self.retry_after = retry_after
