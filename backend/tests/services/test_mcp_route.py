"""MCP Route — HTTP-level tests for POST /mcp.

Tests cover:
    - POST returns a JSON-RPC envelope with HTTP 200 (also for RPC errors)
    - Non-POST methods rejected with 405 before any RPC handling
    - End-to-end tools/call over HTTP
"""

import pytest

from tests.stackflow_samples import WEB_STACK_YAML


async def test_post_initialize(client):
    res = await client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "initialize"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/json")
    assert res.json()["result"]["capabilities"] == {"tools": True}


async def test_post_malformed_body_is_rpc_parse_error(client):
    res = await client.post(
        "/mcp", content=b"{oops", headers={"content-type": "application/json"},
    )
    assert res.status_code == 200
    assert res.json() == {
        "jsonrpc": "2.0", "id": None,
        "error": {"code": -32700, "message": "invalid JSON"},
    }


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
async def test_non_post_rejected(client, method, recording_sink):
    res = await client.request(method, "/mcp")
    assert res.status_code == 405
    assert res.content == b""
    assert recording_sink.entries == []


async def test_tools_call_over_http(client):
    res = await client.post("/mcp", json={
        "jsonrpc": "2.0",
        "id": "req-7",
        "method": "tools/call",
        "params": {
            "name": "stackflow.plan.dns",
            "arguments": {"config_yaml": WEB_STACK_YAML},
        },
    })
    body = res.json()
    assert body["id"] == "req-7"
    assert body["result"]["global"] == {"domain": "example.com", "dns_provider": "cloudflare"}


async def test_tools_list_over_http(client):
    res = await client.post("/mcp", json={"jsonrpc": "2.0", "id": 3, "method": "tools/list"})
    names = [t["name"] for t in res.json()["result"]["tools"]]
    assert names == ["stackflow.validate", "stackflow.plan.dns"]
