"""Tool registry: register and look up tools by name."""

from core.errors import UnknownToolError
from tools.base import BaseTool
from tools.polypizza import POLYPIZZA_TOOLS


class ToolRegistry:
    def __init__(self):
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> BaseTool:
        if name not in self._tools:
            raise UnknownToolError(name)
        return self._tools[name]

    def all_schemas(self) -> list[dict]:
        """Return all tool schemas in registration order."""
        return [t.to_api_schema() for t in self._tools.values()]


def build_registry() -> ToolRegistry:
    registry = ToolRegistry()
    for tool_cls in POLYPIZZA_TOOLS:
        registry.register(tool_cls())
    return registry
