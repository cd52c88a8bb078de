"""Pydantic models for the normalized tool result envelope."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator


class TextContent(BaseModel):
    """A single text content block."""

    type: Literal["text"] = "text"
    text: str = Field(description="Text payload of the block")


class ToolResult(BaseModel):
    """Normalized success/failure envelope returned by every tool."""

    content: list[TextContent] = Field(description="Ordered content blocks")
    is_error: bool = Field(default=False, description="True iff the tool execution failed")
    raw_value: Any | None = Field(
        default=None, description="Opaque passthrough of the upstream response"
    )

    @model_validator(mode="after")
    def _check_content(self) -> ToolResult:
        if not self.content:
            raise ValueError("content must contain at least one block")
        if self.is_error and len(self.content) != 1:
            raise ValueError("an error result carries exactly one content block")
        return self

    @classmethod
    def success(cls, text: str, raw_value: Any | None = None) -> ToolResult:
        return cls(content=[TextContent(text=text)], is_error=False, raw_value=raw_value)

    @classmethod
    def from_blocks(cls, texts: list[str], raw_value: Any | None = None) -> ToolResult:
        return cls(
            content=[TextContent(text=text) for text in texts],
            is_error=False,
            raw_value=raw_value,
        )

    @classmethod
    def failure(cls, message: str) -> ToolResult:
        return cls(content=[TextContent(text=f"Error: {message}")], is_error=True)

    def texts(self) -> list[str]:
        """Return the text of every content block, in order."""
        return [block.text for block in self.content]

    def to_envelope(self) -> dict[str, Any]:
        """Serialize to the wire envelope shared by all transports."""
        envelope = self.model_dump(mode="json", exclude={"raw_value"})
        if self.raw_value is not None:
            envelope["raw_value"] = self.raw_value
        return envelope


class InvokeRequest(BaseModel):
    """Transport-agnostic invocation payload."""

    tool: str = Field(min_length=1, description="Name of the tool to invoke")
    parameters: dict[str, Any] = Field(
        default_factory=dict, description="Free-form tool parameters"
    )


class ToolDescriptor(BaseModel):
    """Discovery entry for a registered tool."""

    name: str
    description: str
    inputSchema: dict[str, Any] = Field(default_factory=dict)
