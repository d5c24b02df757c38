"""Registry of the tools known to a Config."""

from __future__ import annotations

import logging

from langchain_core.tools import BaseTool

from toolport.tools.base import Tool, ToolKind
from toolport.tools.langchain import LangChainTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Ordered collection of tools, keyed by name.

    Iteration order is registration order. Registering a name twice
    replaces the earlier tool in place.
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register_tool(self, tool: Tool) -> None:
        if not tool.name:
            raise ValueError(f"Tool {tool.__class__.__name__} has no name")
        if tool.name in self._tools:
            logger.warning(f"Tool with name '{tool.name}' is already registered. Overwriting.")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def register_langchain_tool(self, tool: BaseTool, kind: ToolKind = ToolKind.OTHER) -> LangChainTool:
        """Wrap a LangChain tool and register it. Returns the wrapper."""
        wrapped = LangChainTool(tool, kind=kind)
        self.register_tool(wrapped)
        return wrapped

    def get_tool(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def get_all_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def get_all_tool_names(self) -> list[str]:
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
