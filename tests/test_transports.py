"""Tests for the REST, SSE and JSON-RPC transports."""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient

from brightdata_mcp.server import create_app
from brightdata_mcp.transports.common import retry_after_seconds


def parse_events(body: str) -> list[tuple[str, dict]]:
    """Split an SSE body into (event, data) pairs."""
    events = []
    for frame in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in frame.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


def rpc(client: TestClient, method: str, params: dict | None = None, msg_id: int = 1, **kwargs):
    message = {"jsonrpc": "2.0", "id": msg_id, "method": method}
    if params is not None:
        message["params"] = params
    return client.post("/mcp", json=message, **kwargs)


@pytest.fixture
def client(dispatcher) -> TestClient:
    return TestClient(create_app(dispatcher=dispatcher))


@pytest.fixture
def make_client(make_dispatcher):
    def _make(**kwargs) -> TestClient:
        return TestClient(create_app(dispatcher=make_dispatcher(**kwargs)))

    return _make


class TestRetryAfter:
    """Tests for Retry-After rounding."""

    @pytest.mark.parametrize("seconds,expected", [(0.0, 1), (0.2, 1), (1.0, 1), (1.01, 2), (39.5, 40)])
    def test_rounds_up_to_whole_seconds(self, seconds: float, expected: int) -> None:
        assert retry_after_seconds(seconds) == expected


class TestRestTransport:
    """Tests for /health, /tools, /invoke and /api/stats."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_tools(self, client: TestClient) -> None:
        response = client.get("/tools")

        assert response.status_code == 200
        assert response.json() == {
            "tools": [
                "search_web",
                "scrape_website",
                "extract_data",
                "take_screenshot",
                "multi_zone_search",
            ]
        }

    def test_invoke_success(self, client: TestClient, fake_provider) -> None:
        fake_provider.body = b"# Example Domain"

        response = client.post(
            "/invoke", json={"tool": "scrape_website", "parameters": {"url": "https://example.com"}}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_error"] is False
        assert body["content"][0]["type"] == "text"
        assert "# Example Domain" in body["content"][0]["text"]
        assert body["raw_value"]["url"] == "https://example.com"

    def test_invoke_tool_failure_is_200(self, client: TestClient) -> None:
        response = client.post(
            "/invoke", json={"tool": "scrape_website", "parameters": {"url": "not-a-url"}}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_error"] is True
        assert len(body["content"]) == 1
        assert "'url'" in body["content"][0]["text"]

    def test_invoke_non_finite_cursor_is_200(self, client: TestClient, fake_provider) -> None:
        response = client.post(
            "/invoke",
            content=b'{"tool": "search_web", "parameters": {"query": "q", "cursor": Infinity}}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_error"] is True
        assert "'cursor'" in body["content"][0]["text"]
        assert fake_provider.calls == []

    def test_invoke_unknown_tool(self, client: TestClient) -> None:
        response = client.post("/invoke", json={"tool": "does_not_exist", "parameters": {}})

        assert response.status_code == 404
        assert response.json()["status"] == 404
        assert "does_not_exist" in response.json()["error"]

    @pytest.mark.parametrize(
        "body",
        [b"{not json", b'{"parameters": {}}', b'{"tool": "", "parameters": {}}', b"[]"],
    )
    def test_invoke_bad_payload(self, client: TestClient, body: bytes) -> None:
        response = client.post(
            "/invoke", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["status"] == 400

    def test_invoke_rate_limited(self, make_client) -> None:
        client = make_client(max_requests=1, window_seconds=60)
        payload = {"tool": "search_web", "parameters": {"query": "q"}}

        assert client.post("/invoke", json=payload).status_code == 200
        response = client.post("/invoke", json=payload)

        assert response.status_code == 429
        retry_after = int(response.headers["Retry-After"])
        assert 1 <= retry_after <= 60
        assert response.json()["retry_after"] > 0

    def test_invoke_requires_token(self, make_client) -> None:
        client = make_client(auth_token="s3cret")
        payload = {"tool": "search_web", "parameters": {"query": "q"}}

        response = client.post("/invoke", json=payload)
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

        response = client.post(
            "/invoke", json=payload, headers={"Authorization": "Bearer s3cret"}
        )
        assert response.status_code == 200

    def test_discovery_is_open_with_auth(self, make_client) -> None:
        client = make_client(auth_token="s3cret")

        assert client.get("/tools").status_code == 200
        assert client.get("/health").status_code == 200

    def test_stats(self, client: TestClient) -> None:
        client.post("/invoke", json={"tool": "search_web", "parameters": {"query": "q"}})
        client.post("/invoke", json={"tool": "nope", "parameters": {}})

        stats = client.get("/api/stats").json()

        assert stats["invocations"]["total"] == 2
        assert stats["invocations"]["succeeded"] == 1
        assert stats["invocations"]["unknown_tool"] == 1
        assert stats["per_tool"]["search_web"] == 1

    def test_stats_requires_token(self, make_client) -> None:
        client = make_client(auth_token="s3cret")

        assert client.get("/api/stats").status_code == 401
        assert (
            client.get("/api/stats", headers={"Authorization": "Bearer s3cret"}).status_code
            == 200
        )


class TestSseTransport:
    """Tests for /sse."""

    def test_result_event(self, client: TestClient) -> None:
        response = client.post(
            "/sse", json={"tool": "search_web", "parameters": {"query": "widgets"}}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = parse_events(response.text)
        assert [name for name, _ in events] == ["accepted", "result"]
        assert events[0][1] == {"tool": "search_web"}
        assert events[1][1]["is_error"] is False

    def test_tool_failure_is_result_event(self, client: TestClient) -> None:
        response = client.post("/sse", json={"tool": "search_web", "parameters": {}})

        events = parse_events(response.text)
        assert [name for name, _ in events] == ["accepted", "result"]
        assert events[1][1]["is_error"] is True

    def test_unknown_tool_is_error_event(self, client: TestClient) -> None:
        response = client.post("/sse", json={"tool": "nope", "parameters": {}})

        events = parse_events(response.text)
        assert [name for name, _ in events] == ["accepted", "error"]
        assert events[1][1]["status"] == 404

    def test_rate_limited_is_error_event(self, make_client) -> None:
        client = make_client(max_requests=1)
        payload = {"tool": "search_web", "parameters": {"query": "q"}}
        client.post("/sse", json=payload)

        events = parse_events(client.post("/sse", json=payload).text)

        assert events[-1][0] == "error"
        assert events[-1][1]["status"] == 429
        assert events[-1][1]["retry_after"] > 0

    def test_bad_payload(self, client: TestClient) -> None:
        response = client.post(
            "/sse", content=b"nope", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400


class TestJsonRpcTransport:
    """Tests for /mcp."""

    def test_initialize(self, client: TestClient) -> None:
        response = rpc(client, "initialize", {"protocolVersion": "2024-11-05"})

        body = response.json()
        assert response.status_code == 200
        assert body["id"] == 1
        assert body["result"]["serverInfo"]["name"] == "brightdata-mcp"
        assert "tools" in body["result"]["capabilities"]

    def test_ping(self, client: TestClient) -> None:
        assert rpc(client, "ping").json()["result"] == {}

    def test_tools_list(self, client: TestClient) -> None:
        tools = rpc(client, "tools/list").json()["result"]["tools"]

        assert [tool["name"] for tool in tools][0] == "search_web"
        assert all("inputSchema" in tool and tool["description"] for tool in tools)

    def test_tools_call(self, client: TestClient) -> None:
        body = rpc(
            client, "tools/call", {"name": "search_web", "arguments": {"query": "widgets"}}, msg_id=9
        ).json()

        assert body["id"] == 9
        assert body["result"]["is_error"] is False
        assert body["result"]["isError"] is False
        assert "widgets" in body["result"]["content"][0]["text"]

    def test_tool_failure_is_result(self, client: TestClient) -> None:
        body = rpc(client, "tools/call", {"name": "scrape_website", "arguments": {}}).json()

        assert "error" not in body
        assert body["result"]["is_error"] is True
        assert body["result"]["isError"] is True

    def test_unknown_tool(self, client: TestClient) -> None:
        body = rpc(client, "tools/call", {"name": "nope", "arguments": {}}).json()

        assert body["error"]["code"] == -32601
        assert body["error"]["data"] == {"tool": "nope"}

    def test_unknown_method(self, client: TestClient) -> None:
        body = rpc(client, "resources/list").json()

        assert body["error"]["code"] == -32601

    @pytest.mark.parametrize(
        "params",
        [None, {"arguments": {}}, {"name": "search_web", "arguments": ["q"]}],
    )
    def test_invalid_params(self, client: TestClient, params: dict | None) -> None:
        body = rpc(client, "tools/call", params).json()

        assert body["error"]["code"] == -32602

    def test_rate_limited(self, make_client) -> None:
        client = make_client(max_requests=1)
        params = {"name": "search_web", "arguments": {"query": "q"}}
        rpc(client, "tools/call", params)

        response = rpc(client, "tools/call", params, msg_id=2)

        assert response.status_code == 200
        error = response.json()["error"]
        assert error["code"] == -32000
        assert error["data"]["retry_after"] > 0

    def test_unauthorized(self, make_client) -> None:
        client = make_client(auth_token="s3cret")
        params = {"name": "search_web", "arguments": {"query": "q"}}

        body = rpc(client, "tools/call", params).json()
        assert body["error"]["code"] == -32001

        body = rpc(
            client, "tools/call", params, headers={"Authorization": "Bearer s3cret"}
        ).json()
        assert body["result"]["is_error"] is False

    def test_parse_error(self, client: TestClient) -> None:
        response = client.post(
            "/mcp", content=b"{oops", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 200
        assert response.json()["error"]["code"] == -32700
        assert response.json()["id"] is None

    @pytest.mark.parametrize(
        "message",
        [
            {"id": 1, "method": "ping"},
            {"jsonrpc": "2.0", "id": 1},
            {"jsonrpc": "2.0", "id": 1, "method": "ping", "params": [1, 2]},
            [1, 2, 3],
        ],
    )
    def test_invalid_request(self, client: TestClient, message) -> None:
        body = client.post("/mcp", json=message).json()

        assert body["error"]["code"] == -32600

    def test_notification_has_no_body(self, client: TestClient) -> None:
        response = client.post(
            "/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"}
        )

        assert response.status_code == 202
        assert response.content == b""


class TestTransportEquivalence:
    """The same call yields the same content on every transport."""

    @pytest.mark.parametrize(
        "tool,parameters",
        [
            ("search_web", {"query": "widgets", "engine": "yandex"}),
            ("scrape_website", {"url": "https://example.com", "format": "raw"}),
            ("scrape_website", {"url": "nope"}),
        ],
    )
    def test_rest_sse_and_mcp_agree(self, client: TestClient, tool: str, parameters: dict) -> None:
        rest = client.post("/invoke", json={"tool": tool, "parameters": parameters}).json()
        sse = parse_events(
            client.post("/sse", json={"tool": tool, "parameters": parameters}).text
        )[-1][1]
        mcp = rpc(client, "tools/call", {"name": tool, "arguments": parameters}).json()["result"]

        assert rest["content"] == sse["content"] == mcp["content"]
        assert rest["is_error"] == sse["is_error"] == mcp["is_error"]
        assert rest.get("raw_value") == mcp.get("raw_value")
