"""Failure taxonomy for tool calls and startup."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised at startup when required configuration is missing."""


class ToolCallError(Exception):
    """Base class for every recoverable, per-call failure.

    ``kind`` is a short machine-readable tag; ``str(err)`` is the message shown
    to the caller after the ``Error: `` prefix.
    """

    kind = "tool_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnknownToolError(ToolCallError):
    kind = "unknown_tool"

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidArgumentsError(ToolCallError):
    kind = "invalid_arguments"


class UpstreamError(ToolCallError):
    """Upstream answered with a non-2xx status."""

    kind = "upstream"

    def __init__(self, status_code: int, reason: str):
        super().__init__(f"API request failed: {status_code} {reason}".rstrip())
        self.status_code = status_code
        self.reason = reason


class TransportError(ToolCallError):
    kind = "transport"


class DecodeError(ToolCallError):
    kind = "decode"
