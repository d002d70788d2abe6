"""Dispatcher: execute one named tool call end-to-end."""

from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import ValidationError

from core.client import PolyPizzaClient
from core.errors import InvalidArgumentsError, ToolCallError
from core.logging_config import new_call_id
from tools.base import ToolResult
from tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class Dispatcher:
    """Resolve a tool, decode its arguments, call upstream, wrap the outcome.

    ``dispatch`` never raises for per-call failures: every error comes back
    as a failed ``ToolResult`` carrying the error kind and message.
    """

    def __init__(self, registry: ToolRegistry, client: PolyPizzaClient):
        self.registry = registry
        self.client = client

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        new_call_id()
        start = time.monotonic()
        logger.info("tool call started", extra={"tool": name})
        try:
            result = ToolResult.ok(await self._execute(name, arguments))
        except ToolCallError as e:
            result = ToolResult.fail(e.kind, str(e))
        except Exception as e:
            logger.exception("Tool '%s' raised unexpectedly", name)
            result = ToolResult.fail("internal", str(e) or type(e).__name__)

        latency_ms = round((time.monotonic() - start) * 1000, 1)
        if result.success:
            logger.info(
                "tool call finished",
                extra={"tool": name, "status": "ok", "latency_ms": latency_ms},
            )
        else:
            logger.warning(
                "tool call failed: %s",
                result.error,
                extra={"tool": name, "status": "error", "kind": result.kind, "latency_ms": latency_ms},
            )
        return result

    async def _execute(self, name: str, arguments: dict[str, Any] | None) -> Any:
        tool = self.registry.get(name)
        if arguments is not None and not isinstance(arguments, dict):
            raise InvalidArgumentsError(f"Arguments for {name} must be an object")
        try:
            args = tool.decode(arguments)
        except ValidationError as e:
            raise InvalidArgumentsError(_describe(name, e)) from e
        endpoint = tool.endpoint(args)
        logger.debug("Resolved %s → GET %s", name, endpoint)
        return await self.client.get(endpoint)


def _describe(name: str, err: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in e['loc']) or 'arguments'}: {e['msg']}"
        for e in err.errors()
    )
    return f"Invalid arguments for {name}: {problems}"
