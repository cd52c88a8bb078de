"""Tool capability interface and shared parameter validation helpers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar
from urllib.parse import urlparse

from brightdata_mcp.errors import InvalidParametersError
from brightdata_mcp.models.envelope import ToolDescriptor, ToolResult


class Tool(ABC):
    """A named, asynchronous unit of remote web-data work.

    Subclasses set ``name``, ``description`` and ``input_schema`` as class
    attributes and implement ``execute``. ``execute`` validates its own
    parameters before any outbound call and raises ``ToolError`` subclasses
    on failure; it never lets a transport exception escape.
    """

    name: ClassVar[str]
    description: ClassVar[str] = ""
    input_schema: ClassVar[dict[str, Any]] = {"type": "object", "properties": {}}

    @abstractmethod
    async def execute(self, parameters: Mapping[str, Any]) -> ToolResult:
        """Run the tool.

        Args:
            parameters: Free-form JSON-like parameter map

        Returns:
            ToolResult with at least one content block

        Raises:
            InvalidParametersError: If a parameter is missing or malformed
            UpstreamFailureError: If the provider call fails
        """

    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=self.name, description=self.description, inputSchema=self.input_schema
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


def require_string(parameters: Mapping[str, Any], field: str) -> str:
    """Return a required, non-blank string parameter."""
    value = parameters.get(field)
    if value is None:
        raise InvalidParametersError(field, "is required")
    if not isinstance(value, str):
        raise InvalidParametersError(field, f"must be a string, got {type(value).__name__}")
    if not value.strip():
        raise InvalidParametersError(field, "must not be empty")
    return value


def is_http_url(url: str) -> bool:
    """Check that a URL uses http or https and names a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def require_url(parameters: Mapping[str, Any], field: str = "url") -> str:
    """Return a required http(s) URL parameter."""
    url = require_string(parameters, field).strip()
    if not is_http_url(url):
        raise InvalidParametersError(field, f"must be an http:// or https:// URL, got {url!r}")
    return url


def optional_choice(
    parameters: Mapping[str, Any], field: str, choices: tuple[str, ...], default: str
) -> str:
    """Return a string parameter restricted to ``choices``."""
    value = parameters.get(field)
    if value is None:
        return default
    if not isinstance(value, str) or value not in choices:
        raise InvalidParametersError(
            field, f"must be one of {', '.join(choices)}, got {value!r}"
        )
    return value


def optional_int(
    parameters: Mapping[str, Any],
    field: str,
    default: int,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Return an integer parameter within optional bounds.

    Integral strings (as produced by form fields and CLI flags) are accepted.
    """
    value = parameters.get(field)
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidParametersError(field, "must be an integer, got bool")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as e:
            raise InvalidParametersError(field, f"must be an integer, got {value!r}") from e
    elif isinstance(value, float) and value.is_integer():
        value = int(value)
    elif not isinstance(value, int):
        raise InvalidParametersError(
            field, f"must be an integer, got {type(value).__name__}"
        )
    if minimum is not None and value < minimum:
        raise InvalidParametersError(field, f"must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise InvalidParametersError(field, f"must be <= {maximum}, got {value}")
    return value


def optional_bool(parameters: Mapping[str, Any], field: str, default: bool = False) -> bool:
    value = parameters.get(field)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise InvalidParametersError(field, f"must be a boolean, got {type(value).__name__}")
    return value


def optional_string_list(parameters: Mapping[str, Any], field: str) -> list[str] | None:
    value = parameters.get(field)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidParametersError(field, "must be a list of strings")
    return value


def optional_mapping(parameters: Mapping[str, Any], field: str) -> dict[str, Any] | None:
    value = parameters.get(field)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise InvalidParametersError(field, f"must be an object, got {type(value).__name__}")
    return dict(value)
