"""
Runtime configuration for the toolport CLI.

load_cli_config() combines merged settings with command-line arguments into
a Config. The Config is the one place that knows which tools exist: call
create_tool_registry() to get them.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, field
from enum import Enum
from importlib import metadata
from pathlib import Path
from typing import Any

from toolport.tools import Tool, ToolKind, ToolRegistry
from toolport.tools.calculator import create_calculator_tools
from toolport.tools.echo import create_echo_tool
from toolport.tools.filesystem import ListDirectoryTool, ReadFileTool, WriteFileTool

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "toolport"
VERSION_ENV = "TOOLPORT_VERSION"

# One id per process, shared by everything that needs to tag its work.
session_id = str(uuid.uuid4())


class ApprovalMode(str, Enum):
    DEFAULT = "default"
    AUTO_EDIT = "auto_edit"
    YOLO = "yolo"


@dataclass
class CliArgs:
    """
    Parsed command-line options. None means "not given on the command line".

    yolo is the one flag with a concrete default: False keeps a
    non-interactive run from auto-approving mutating tools.
    """
    yolo: bool = False
    approval_mode: str | None = None
    core_tools: list[str] | None = None
    allowed_tools: list[str] | None = None
    exclude_tools: list[str] | None = None


@dataclass
class Config:
    session_id: str
    target_dir: Path
    approval_mode: ApprovalMode = ApprovalMode.DEFAULT
    core_tools: list[str] | None = None
    exclude_tools: list[str] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)

    def is_tool_enabled(self, name: str, kind: ToolKind = ToolKind.OTHER) -> bool:
        if self.core_tools is not None and name not in self.core_tools:
            return False
        if name in self.exclude_tools:
            return False
        # Nobody can confirm a write in a non-interactive run.
        if kind is ToolKind.EDIT and self.approval_mode is ApprovalMode.DEFAULT:
            return False
        return True

    def create_tool_registry(self) -> ToolRegistry:
        """Build a registry with every built-in tool this config allows."""
        registry = ToolRegistry()

        for lc_tool in [create_echo_tool(), *create_calculator_tools()]:
            if self.is_tool_enabled(lc_tool.name):
                registry.register_langchain_tool(lc_tool)
            else:
                logger.debug(f"Tool disabled by configuration: {lc_tool.name}")

        workspace_tools: list[Tool] = [
            ListDirectoryTool(self.target_dir),
            ReadFileTool(self.target_dir),
            WriteFileTool(self.target_dir),
        ]
        for tool in workspace_tools:
            if self.is_tool_enabled(tool.name, tool.kind):
                registry.register_tool(tool)
            else:
                logger.debug(f"Tool disabled by configuration: {tool.name}")

        logger.debug(f"Tool registry created with {len(registry)} tools: {registry.get_all_tool_names()}")
        return registry


def _resolve_approval_mode(argv: CliArgs, tool_settings: dict[str, Any]) -> ApprovalMode:
    if argv.yolo:
        return ApprovalMode.YOLO
    raw = argv.approval_mode or tool_settings.get("approvalMode")
    if raw is None:
        return ApprovalMode.DEFAULT
    try:
        return ApprovalMode(raw)
    except ValueError:
        valid = [m.value for m in ApprovalMode]
        raise ValueError(f"Invalid approval mode: {raw!r}. Valid values: {valid}") from None


def _string_list(value: Any, key: str) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Setting '{key}' must be a list of tool names")
    return list(value)


def load_cli_config(
    settings: dict[str, Any],
    session_id: str,
    argv: CliArgs,
    cwd: str | Path | None = None,
) -> Config:
    """
    Build a Config from merged settings and CLI arguments.

    Raises:
        ValueError: on an unknown approval mode or malformed tool lists.
    """
    tool_settings = settings.get("tools") or {}
    if not isinstance(tool_settings, dict):
        raise ValueError("Setting 'tools' must be an object")

    # core_tools replaces the settings allowlist; allowed_tools extends it.
    # With no allowlist at all every tool is already allowed.
    core_tools = argv.core_tools
    if core_tools is None:
        core_tools = _string_list(tool_settings.get("core"), "tools.core")
    if core_tools is not None:
        core_tools = list(core_tools)
        for name in argv.allowed_tools or []:
            if name not in core_tools:
                core_tools.append(name)
    exclude_tools = _string_list(tool_settings.get("exclude"), "tools.exclude") or []
    for name in argv.exclude_tools or []:
        if name not in exclude_tools:
            exclude_tools.append(name)

    return Config(
        session_id=session_id,
        target_dir=Path(cwd or os.getcwd()).resolve(),
        approval_mode=_resolve_approval_mode(argv, tool_settings),
        core_tools=core_tools,
        exclude_tools=exclude_tools,
        settings=settings,
    )


def get_version() -> str | None:
    """CLI version from $TOOLPORT_VERSION or the installed distribution, else None."""
    version = os.environ.get(VERSION_ENV)
    if version:
        return version
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return None
