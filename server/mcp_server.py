"""MCP stdio server exposing the Poly Pizza tools."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
import sys

import httpx
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from core.client import PolyPizzaClient
from core.config import SERVER_NAME, SERVER_VERSION, Settings
from core.dispatcher import Dispatcher
from tools.base import ToolResult
from tools.registry import ToolRegistry, build_registry

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)
SHUTDOWN_GRACE_SECONDS = 1.0


def to_call_result(result: ToolResult) -> types.CallToolResult:
    """Convert a dispatcher result into the MCP tool-call envelope."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=not result.success,
    )


class PolyPizzaServer:
    """Wires the tool registry and dispatcher into an MCP low-level server."""

    def __init__(
        self,
        settings: Settings,
        registry: ToolRegistry | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self.registry = registry or build_registry()
        self.client = PolyPizzaClient(settings, transport=transport)
        self.dispatcher = Dispatcher(self.registry, self.client)
        self.server = Server(SERVER_NAME, version=SERVER_VERSION)
        self._register_handlers()

    def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=schema["name"],
                description=schema["description"],
                inputSchema=schema["inputSchema"],
            )
            for schema in self.registry.all_schemas()
        ]

    async def call_tool(self, name: str, arguments: dict | None) -> types.CallToolResult:
        result = await self.dispatcher.dispatch(name, arguments)
        return to_call_result(result)

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            logger.debug("list_tools called")
            return self.list_tools()

        # Arguments are decoded by the dispatcher so that bad input comes back
        # in the same "Error: ..." envelope as every other failure.
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict) -> types.CallToolResult:
            return await self.call_tool(name, arguments)

    async def run(self) -> None:
        """Serve over stdio until the client disconnects or the task is cancelled."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Poly Pizza MCP server running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )

    async def aclose(self) -> None:
        await self.client.aclose()


async def serve(settings: Settings) -> None:
    """Run the server until the client disconnects or SIGINT/SIGTERM arrives.

    A signal cancels the serving task, closes the upstream client, flushes
    logs and ends the process with status 0.
    """
    server = PolyPizzaServer(settings)
    loop = asyncio.get_running_loop()
    main_task = asyncio.current_task()
    shutdowns: set[asyncio.Task] = set()

    def on_signal(sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down", sig.name)
        shutdowns.add(loop.create_task(_shutdown(server, main_task)))

    for sig in SHUTDOWN_SIGNALS:
        # add_signal_handler is unavailable on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, on_signal, sig)

    try:
        await server.run()
    except asyncio.CancelledError:
        logger.info("Shutdown signal received, transport closed")
    finally:
        await server.aclose()
        for sig in SHUTDOWN_SIGNALS:
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(sig)


async def _shutdown(server: PolyPizzaServer, main_task: asyncio.Task) -> None:
    main_task.cancel()
    # stdin is read by a worker thread that cancellation cannot interrupt,
    # so the serving task may never finish while the client keeps stdin open
    await asyncio.wait({main_task}, timeout=SHUTDOWN_GRACE_SECONDS)
    await server.aclose()
    _flush_output()
    os._exit(0)


def _flush_output() -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()
    for stream in (sys.stdout, sys.stderr):
        with contextlib.suppress(ValueError, OSError):
            stream.flush()
