"""
Expose the CLI's tool registry as an MCP server.

Every tool in the registry becomes an MCP tool of the same name. A call
builds an invocation from the arguments, executes it, and turns the
ToolResult (or whatever it raised) into a tools/call response:

    success        {"content": [{"type": "text", "text": <llm_content>}]}
    tool error     {"content": [{"type": "text", "text": "Error: <message>"}], "isError": True}
    exception      {"content": [{"type": "text", "text": "Internal Error: <message>"}], "isError": True}

Nothing raised by a tool escapes its endpoint.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
from pathlib import Path
from typing import Any

from toolport.config import CliArgs, Config, get_version, load_cli_config, session_id
from toolport.server import McpToolServer, ToolCallback
from toolport.settings import load_settings
from toolport.tools import Tool, ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "toolport-cli-server"
PRODUCT_NAME = "Toolport CLI"
DEFAULT_VERSION = "1.0.0"

# Tools take open argument objects; no schema is derived from the tool.
OPEN_INPUT_SCHEMA: dict[str, Any] = {"type": "object"}


def normalize_error(error: object) -> str:
    """Message of an exception, or the string form of anything else."""
    if isinstance(error, BaseException):
        return str(error) or error.__class__.__name__
    return str(error)


def _json_safe(value: Any) -> Any:
    """Same value with NaN/Infinity replaced by None, as JSON.stringify writes null."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if hasattr(value, "model_dump"):
        return _json_safe(value.model_dump())
    return value


def content_to_text(llm_content: Any) -> str:
    """Text as-is; anything else as compact JSON, keys in their original order."""
    if isinstance(llm_content, str):
        return llm_content
    return json.dumps(
        _json_safe(llm_content),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=str,
    )


def text_response(text: str, is_error: bool = False) -> dict[str, Any]:
    response: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        response["isError"] = True
    return response


def tool_description(tool: Tool) -> str:
    return tool.description or f"{PRODUCT_NAME} {tool.name} tool"


async def invoke_tool(tool: Tool, args: dict[str, Any] | None) -> dict[str, Any]:
    """Run a tool once and map the outcome to a tools/call response."""
    try:
        invocation = tool.build(args or {})
        # Never set: callers have no way to cancel a call.
        result = await invocation.execute(asyncio.Event())

        if result.error:
            return text_response(f"Error: {result.error.message}", is_error=True)

        return text_response(content_to_text(result.llm_content))
    except Exception as e:
        logger.debug(f"Tool {tool.name} raised", exc_info=True)
        return text_response(f"Internal Error: {normalize_error(e)}", is_error=True)


def make_tool_callback(tool: Tool) -> ToolCallback:
    async def _callback(args: dict[str, Any]) -> dict[str, Any]:
        return await invoke_tool(tool, args)

    return _callback


class ToolExposureAdapter:
    """
    Builds an McpToolServer from a Config's tool registry.

    Args:
        config: Source of the tool registry
        version: Server version; DEFAULT_VERSION when None or empty
    """

    def __init__(self, config: Config, version: str | None = None):
        self.config = config
        self.version = version or DEFAULT_VERSION

    def register_tools(self, server: McpToolServer, registry: ToolRegistry) -> list[str]:
        """Register one endpoint per registry tool. Returns the registered names."""
        registered = []
        for tool in registry.get_all_tools():
            logger.info(f"Registering MCP tool: {tool.name}")
            server.register(
                tool.name,
                tool_description(tool),
                dict(OPEN_INPUT_SCHEMA),
                make_tool_callback(tool),
            )
            registered.append(tool.name)
        return registered

    def build_server(self) -> McpToolServer:
        registry = self.config.create_tool_registry()
        server = McpToolServer(SERVER_NAME, self.version)
        self.register_tools(server, registry)
        return server

    async def serve(self) -> None:
        server = self.build_server()
        logger.info(f"{PRODUCT_NAME} MCP server started on stdio")
        await server.run()


def create_adapter(cwd: str | Path) -> ToolExposureAdapter:
    """Load settings and config for cwd the way every CLI command does."""
    loaded_settings = load_settings(cwd)
    # Non-interactive and non-privileged: no flags beyond the safe defaults.
    argv = CliArgs(yolo=False)
    config = load_cli_config(loaded_settings.merged, session_id, argv, cwd)
    return ToolExposureAdapter(config, get_version())


async def start_server(cwd: str | Path) -> None:
    """Serve the CLI's tools over MCP on stdio until stdin closes."""
    adapter = create_adapter(cwd)
    await adapter.serve()
