"""Registry mapping tool names to tool instances."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from brightdata_mcp.errors import DuplicateToolNameError, ResolverError
from brightdata_mcp.models.envelope import ToolDescriptor
from brightdata_mcp.tools.base import Tool

logger = logging.getLogger(__name__)


class ToolResolver:
    """Insertion-ordered tool registry.

    Tools are registered once at startup. After ``freeze()`` the registry is
    read-only, so lookups during dispatch need no locking.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        self._frozen = False
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Add a tool to the registry.

        Raises:
            DuplicateToolNameError: If a tool with the same name exists
            ResolverError: If the registry is frozen or the name is empty
        """
        if self._frozen:
            raise ResolverError("Tool registry is frozen, register tools at startup")
        name = tool.name
        if not name:
            raise ResolverError(f"{tool!r} has an empty name")
        if name in self._tools:
            raise DuplicateToolNameError(name)
        self._tools[name] = tool
        logger.debug(f"Registered tool {name}")

    def freeze(self) -> ToolResolver:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, name: str) -> Tool | None:
        """Exact, case-sensitive lookup; None when the name is not registered."""
        return self._tools.get(name)

    def list(self) -> list[str]:
        """Registered tool names in registration order."""
        return list(self._tools)

    def descriptors(self) -> list[ToolDescriptor]:
        return [tool.descriptor() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
