"""Tool base class and type definitions."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict


class ToolArguments(BaseModel):
    """Base for per-tool argument records decoded from the caller's bag."""

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)


class ToolResult(BaseModel):
    success: bool
    output: Any = None
    error: str | None = None
    kind: str | None = None

    @classmethod
    def ok(cls, output: Any) -> ToolResult:
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, kind: str, error: str) -> ToolResult:
        return cls(success=False, kind=kind, error=error)

    @property
    def text(self) -> str:
        if self.success:
            return json.dumps(self.output, indent=2, ensure_ascii=False)
        return f"Error: {self.error}"

    def to_envelope(self) -> dict:
        """Wire shape returned to the MCP client for a tool call."""
        envelope: dict = {"content": [{"type": "text", "text": self.text}]}
        if not self.success:
            envelope["isError"] = True
        return envelope


class BaseTool(ABC):
    """All tools must inherit from this class.

    A tool is a pure description: schema, argument model and endpoint
    construction. The dispatcher performs the HTTP call.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    arguments: ClassVar[type[ToolArguments]]

    @abstractmethod
    def input_schema(self) -> dict:
        """Return JSON Schema for tool input parameters."""
        ...

    @abstractmethod
    def endpoint(self, args: ToolArguments) -> str:
        """Build the upstream path (with query string) for decoded *args*."""
        ...

    def decode(self, raw: dict[str, Any] | None) -> ToolArguments:
        return self.arguments.model_validate(raw or {})

    def to_api_schema(self) -> dict:
        """Convert to MCP tool listing format."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


# ── Path helpers ─────────────────────────────────────────────────────────────

def path_segment(value: str) -> str:
    """Percent-encode one path segment the way encodeURIComponent does."""
    return quote(value, safe="!~*'()")


def format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def with_query(path: str, params: list[tuple[str, str]]) -> str:
    """Append a form-encoded query string to *path*, or nothing when empty."""
    query = urlencode(params)
    return f"{path}?{query}" if query else path
