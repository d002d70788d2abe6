"""Tests for the MCP server wiring: discovery, invocation envelopes, startup config."""

import asyncio
import os
import signal
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from core.config import Settings
from core.errors import ConfigError
from server.mcp_server import PolyPizzaServer, _shutdown, to_call_result
from tools.base import ToolResult


@pytest.fixture
async def server(settings, upstream):
    srv = PolyPizzaServer(settings, transport=upstream.transport)
    yield srv
    await srv.aclose()


# ── Direct handler calls ─────────────────────────────────────────────────────

def test_list_tools_returns_five_entries(server):
    tools = server.list_tools()
    assert [t.name for t in tools] == [
        "get_model", "get_list", "search_models", "search_models_by_keyword", "get_user",
    ]
    by_name = {t.name: t for t in tools}
    assert by_name["search_models_by_keyword"].inputSchema["required"] == ["keyword"]
    assert "required" not in by_name["search_models"].inputSchema


async def test_call_tool_success(server, upstream):
    upstream.reply(200, json={"id": "abc", "title": "Cube"})
    result = await server.call_tool("get_model", {"id": "abc"})
    assert result.isError is False
    assert result.content[0].type == "text"
    assert result.content[0].text == '{\n  "id": "abc",\n  "title": "Cube"\n}'


async def test_call_tool_unknown(server):
    result = await server.call_tool("nope", {})
    assert result.isError is True
    assert result.content[0].text == "Error: Unknown tool: nope"


def test_to_call_result_error_flag():
    result = to_call_result(ToolResult.fail("upstream", "API request failed: 404 Not Found"))
    assert result.isError is True
    assert len(result.content) == 1


# ── Over the MCP protocol ────────────────────────────────────────────────────

async def test_protocol_discovery(server):
    async with create_connected_server_and_client_session(server.server) as session:
        listed = await session.list_tools()
    assert len(listed.tools) == 5
    assert {t.name for t in listed.tools} == {
        "get_model", "get_list", "search_models", "search_models_by_keyword", "get_user",
    }


async def test_protocol_call_success(server, upstream):
    upstream.reply(200, json={"total": 0, "results": []})
    async with create_connected_server_and_client_session(server.server) as session:
        result = await session.call_tool("search_models_by_keyword", {"keyword": "fire hydrant"})
    assert not result.isError
    assert result.content[0].text == '{\n  "total": 0,\n  "results": []\n}'
    assert upstream.last_path == "/search/fire%20hydrant"


async def test_protocol_limit_above_maximum_is_forwarded(server, upstream):
    async with create_connected_server_and_client_session(server.server) as session:
        result = await session.call_tool("search_models", {"category": "3", "limit": 40})
    assert not result.isError
    assert upstream.last_path == "/search?category=3&limit=40"


async def test_protocol_upstream_error(server, upstream):
    upstream.reply(404)
    async with create_connected_server_and_client_session(server.server) as session:
        result = await session.call_tool("get_model", {"id": "missing"})
    assert result.isError is True
    assert "404" in result.content[0].text


async def test_protocol_unknown_tool(server):
    async with create_connected_server_and_client_session(server.server) as session:
        result = await session.call_tool("get_everything", {})
    assert result.isError is True
    assert "Unknown tool" in result.content[0].text


# ── Startup configuration ────────────────────────────────────────────────────

def test_missing_token_prevents_server_construction():
    with pytest.raises(ConfigError, match="POLYPIZZA_AUTH_TOKEN"):
        PolyPizzaServer(Settings.from_env({}))


# ── Process lifecycle ────────────────────────────────────────────────────────

REPO_ROOT = Path(__file__).resolve().parent.parent


def _start_server() -> subprocess.Popen:
    """Launch ``main.py serve`` with stdin held open, and wait until it is serving."""
    env = {**os.environ, "POLYPIZZA_AUTH_TOKEN": "t", "LOG_LEVEL": "INFO"}
    proc = subprocess.Popen(
        [sys.executable, "main.py", "serve"],
        cwd=REPO_ROOT,
        env=env,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    for line in proc.stderr:
        if "running on stdio" in line:
            return proc
    proc.kill()
    raise AssertionError(f"server did not start (rc={proc.wait()})")


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
@pytest.mark.parametrize("sig", [signal.SIGINT, signal.SIGTERM])
def test_signal_terminates_process_with_stdin_open(sig):
    proc = _start_server()
    try:
        proc.send_signal(sig)
        assert proc.wait(timeout=10) == 0
        assert "Received" in proc.stderr.read()
    finally:
        if proc.poll() is None:
            proc.kill()
        proc.stdin.close()


def test_closing_stdin_ends_process():
    proc = _start_server()
    try:
        proc.stdin.close()
        assert proc.wait(timeout=10) == 0
    finally:
        if proc.poll() is None:
            proc.kill()


async def test_shutdown_cancels_serving_task_and_exits(server):
    serving = asyncio.create_task(asyncio.sleep(60))
    with patch("server.mcp_server.os._exit") as exit_mock:
        await _shutdown(server, serving)
    assert serving.cancelled()
    assert server.client._http.is_closed
    exit_mock.assert_called_once_with(0)
