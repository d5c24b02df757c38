"""
MCP tool server.

A thin registration layer over the MCP SDK's low-level Server. Each tool is
registered by name with a description, an input schema and an async
callback; the SDK owns the protocol (initialize, tools/list, tools/call,
ping) and the stdio transport.

    server = McpToolServer("my-server", "1.0.0")

    async def handle(args: dict) -> dict:
        return {"content": [{"type": "text", "text": f"hello {args.get('who')}"}]}

    server.register("hello", "Says hello", {"type": "object"}, handle)
    asyncio.run(server.run())

Callbacks return the tools/call result as a plain dict:
{"content": [{"type": "text", "text": ...}], "isError"?: bool}.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

logger = logging.getLogger(__name__)

ToolCallback = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


@dataclass
class RegisteredTool:
    name: str
    description: str
    input_schema: dict[str, Any]
    callback: ToolCallback

    def to_mcp(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


class McpToolServer:
    """
    MCP server exposing individually registered tools.

    tools/list reports tools in registration order. tools/call dispatches
    by name to the registered callback.
    """

    def __init__(self, name: str, version: str):
        self.name = name
        self.version = version
        self._tools: dict[str, RegisteredTool] = {}

        self._server = Server(name, version=version)
        self._server.list_tools()(self._list_tools)
        # Arguments go to the callback as sent; tools check their own params.
        self._server.call_tool(validate_input=False)(self._call_tool_result)

    @property
    def mcp_server(self) -> Server:
        """The underlying SDK server (for in-memory sessions and custom transports)."""
        return self._server

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools.keys())

    def register(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        callback: ToolCallback,
    ) -> None:
        """Register a tool endpoint. Raises ValueError if the name is taken."""
        if not name:
            raise ValueError("Tool name must not be empty")
        if name in self._tools:
            raise ValueError(f"Tool {name} is already registered")
        self._tools[name] = RegisteredTool(name, description, input_schema, callback)

    async def _list_tools(self) -> list[types.Tool]:
        return [tool.to_mcp() for tool in self._tools.values()]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Route a tools/call to the registered callback."""
        tool = self._tools.get(name)
        if tool is None:
            return {
                "content": [{
                    "type": "text",
                    "text": f"Unknown tool: '{name}'. Available: {self.tool_names}",
                }],
                "isError": True,
            }
        return await tool.callback(arguments or {})

    async def _call_tool_result(self, name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return types.CallToolResult.model_validate(await self.call_tool(name, arguments))

    async def run(self) -> None:
        """
        Serve over stdin/stdout.

        Returns when stdin is closed (the client went away).
        """
        logger.info(f"MCP server {self.name} {self.version} starting with "
                    f"{len(self._tools)} tools: {self.tool_names}")

        async with stdio_server() as (read_stream, write_stream):
            await self._server.run(
                read_stream,
                write_stream,
                self._server.create_initialization_options(),
            )
