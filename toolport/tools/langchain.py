"""
Bridge between LangChain tools and the toolport ToolRegistry.

Any LangChain BaseTool (StructuredTool, @tool-decorated functions, community
tools) can be registered and is then exposed like a built-in tool:

    from langchain_core.tools import StructuredTool

    lc_tool = StructuredTool.from_function(func=..., name="...", description="...")
    registry.register_langchain_tool(lc_tool)

Argument validation is LangChain's: bad arguments raise from execute().
A ToolException raised by the tool is reported as a tool error instead.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from langchain_core.tools import BaseTool, ToolException

from toolport.tools.base import Tool, ToolErrorType, ToolInvocation, ToolKind, ToolResult

logger = logging.getLogger(__name__)


class LangChainToolInvocation(ToolInvocation):

    def __init__(self, tool: BaseTool, params: dict[str, Any]):
        super().__init__(params)
        self._tool = tool

    async def execute(self, signal: asyncio.Event) -> ToolResult:
        if signal.is_set():
            return ToolResult.failure(f"{self._tool.name} was cancelled", ToolErrorType.CANCELLED)

        try:
            output = await self._tool.ainvoke(self.params)
        except ToolException as e:
            logger.debug(f"LangChain tool {self._tool.name} reported an error: {e}")
            return ToolResult.failure(str(e))

        return ToolResult(llm_content=output)


class LangChainTool(Tool):
    """Adapts a LangChain BaseTool to the Tool contract."""

    def __init__(self, tool: BaseTool, kind: ToolKind = ToolKind.OTHER):
        self._tool = tool
        self.name = tool.name
        self.description = tool.description or ""
        self.kind = kind

    def create_invocation(self, params: dict[str, Any]) -> ToolInvocation:
        return LangChainToolInvocation(self._tool, params)
