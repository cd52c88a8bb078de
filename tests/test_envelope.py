"""Tests for the result envelope and protocol models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from brightdata_mcp.errors import ToolExecutionFailedError, UpstreamFailureError
from brightdata_mcp.models import (
    InvokeRequest,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolResult,
)


class TestToolResult:
    """Tests for ToolResult construction and serialization."""

    def test_success(self) -> None:
        result = ToolResult.success("hello", {"status": 200})

        assert result.is_error is False
        assert result.texts() == ["hello"]
        assert result.raw_value == {"status": 200}

    def test_failure_prefix(self) -> None:
        result = ToolResult.failure("upstream timed out")

        assert result.is_error is True
        assert result.texts() == ["Error: upstream timed out"]
        assert result.raw_value is None

    def test_empty_content_rejected(self) -> None:
        with pytest.raises(ValidationError, match="at least one block"):
            ToolResult(content=[])

    def test_error_requires_single_block(self) -> None:
        with pytest.raises(ValidationError, match="exactly one content block"):
            ToolResult(content=[TextContent(text="a"), TextContent(text="b")], is_error=True)

    def test_from_blocks_keeps_order(self) -> None:
        result = ToolResult.from_blocks(["first", "second", "third"])

        assert result.texts() == ["first", "second", "third"]

    def test_envelope_shape(self) -> None:
        envelope = ToolResult.success("ok", {"a": None, "b": [1, 2]}).to_envelope()

        assert envelope == {
            "content": [{"type": "text", "text": "ok"}],
            "is_error": False,
            "raw_value": {"a": None, "b": [1, 2]},
        }

    def test_envelope_omits_missing_raw_value(self) -> None:
        envelope = ToolResult.failure("nope").to_envelope()

        assert "raw_value" not in envelope
        assert envelope["is_error"] is True

    def test_execution_failure_maps_to_envelope(self) -> None:
        error = ToolExecutionFailedError("scrape_website", UpstreamFailureError("HTTP 502"))

        result = error.to_result()

        assert result.is_error is True
        assert result.texts() == ["Error: HTTP 502"]


class TestInvokeRequest:
    """Tests for the invocation payload."""

    def test_parameters_default_to_empty(self) -> None:
        payload = InvokeRequest.model_validate({"tool": "search_web"})

        assert payload.parameters == {}

    def test_tool_required(self) -> None:
        with pytest.raises(ValidationError):
            InvokeRequest.model_validate({"parameters": {}})

    def test_empty_tool_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InvokeRequest.model_validate({"tool": ""})

    def test_parameters_must_be_object(self) -> None:
        with pytest.raises(ValidationError):
            InvokeRequest.model_validate({"tool": "search_web", "parameters": ["q"]})


class TestJsonRpcModels:
    """Tests for JSON-RPC request and response framing."""

    def test_request_with_id(self) -> None:
        request = JsonRpcRequest.model_validate(
            {"jsonrpc": "2.0", "id": 7, "method": "tools/list"}
        )

        assert request.id == 7
        assert request.is_notification is False

    def test_null_id_is_not_a_notification(self) -> None:
        request = JsonRpcRequest.model_validate({"jsonrpc": "2.0", "id": None, "method": "ping"})

        assert request.is_notification is False

    def test_missing_id_is_notification(self) -> None:
        request = JsonRpcRequest.model_validate(
            {"jsonrpc": "2.0", "method": "notifications/initialized"}
        )

        assert request.is_notification is True

    def test_wrong_version_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate({"jsonrpc": "1.0", "id": 1, "method": "ping"})

    def test_result_wire_format(self) -> None:
        wire = JsonRpcResponse(id="abc", result={"tools": []}).to_wire()

        assert wire == {"jsonrpc": "2.0", "id": "abc", "result": {"tools": []}}

    def test_error_wire_format(self) -> None:
        wire = JsonRpcResponse(
            id=1, error=JsonRpcError(code=-32601, message="Method not found")
        ).to_wire()

        assert wire == {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32601, "message": "Method not found"},
        }
        assert "result" not in wire
