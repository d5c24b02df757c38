"""
toolport: expose a CLI's built-in tools over MCP.

Architecture:
    ┌──────────────┐     stdio      ┌──────────────────────────────┐
    │  MCP client  │ ────────────── │ toolport server              │
    │ (any process)│   JSON-RPC     │  McpToolServer (mcp SDK)     │
    └──────────────┘                │    └─ one endpoint per tool  │
                                    │  ToolExposureAdapter         │
                                    │    └─ Config → ToolRegistry  │
                                    └──────────────────────────────┘

Settings (toolport.settings) and CLI arguments produce a Config
(toolport.config). The Config builds the ToolRegistry (toolport.tools).
ToolExposureAdapter (toolport.adapter) registers every tool on an
McpToolServer (toolport.server) and serves it over stdio.
"""

from toolport.adapter import ToolExposureAdapter, invoke_tool, normalize_error, start_server
from toolport.config import CliArgs, Config, load_cli_config
from toolport.server import McpToolServer
from toolport.settings import LoadedSettings, SettingsError, load_settings
from toolport.tools import Tool, ToolInvocation, ToolRegistry, ToolResult

__all__ = [
    "CliArgs",
    "Config",
    "LoadedSettings",
    "McpToolServer",
    "SettingsError",
    "Tool",
    "ToolExposureAdapter",
    "ToolInvocation",
    "ToolRegistry",
    "ToolResult",
    "invoke_tool",
    "load_cli_config",
    "load_settings",
    "normalize_error",
    "start_server",
]
