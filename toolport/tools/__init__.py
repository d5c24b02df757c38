"""Tool contracts, the tool registry and the built-in tools."""

from toolport.tools.base import Tool, ToolError, ToolErrorType, ToolInvocation, ToolKind, ToolResult
from toolport.tools.langchain import LangChainTool
from toolport.tools.registry import ToolRegistry

__all__ = [
    "LangChainTool",
    "Tool",
    "ToolError",
    "ToolErrorType",
    "ToolInvocation",
    "ToolKind",
    "ToolRegistry",
    "ToolResult",
]
