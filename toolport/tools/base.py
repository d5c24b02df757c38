"""
Tool contracts shared by the registry, the built-in tools and the MCP adapter.

A tool is declared once and invoked many times:

    tool = ReadFileTool(target_dir)
    invocation = tool.build({"path": "README.md"})   # validates params
    result = await invocation.execute(signal)          # does the work

build() raises on invalid parameters. execute() reports expected failures
through ToolResult.error and only raises on bugs.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ToolKind(str, Enum):
    READ = "read"
    EDIT = "edit"
    OTHER = "other"


class ToolErrorType(str, Enum):
    INVALID_PARAMS = "invalid_params"
    EXECUTION_FAILED = "execution_failed"
    PATH_NOT_IN_WORKSPACE = "path_not_in_workspace"
    FILE_NOT_FOUND = "file_not_found"
    CANCELLED = "cancelled"


@dataclass
class ToolError:
    message: str
    type: ToolErrorType = ToolErrorType.EXECUTION_FAILED


@dataclass
class ToolResult:
    """
    Outcome of a tool invocation.

    llm_content is what the caller (a model, or a remote MCP client) sees:
    either text or a JSON-serializable structure. return_display is an
    optional human-facing summary.
    """
    llm_content: Any = ""
    return_display: str | None = None
    error: ToolError | None = None

    @classmethod
    def failure(cls, message: str, error_type: ToolErrorType = ToolErrorType.EXECUTION_FAILED) -> "ToolResult":
        return cls(
            llm_content=f"Error: {message}",
            return_display=message,
            error=ToolError(message=message, type=error_type),
        )


class ToolInvocation(ABC):
    """A tool bound to validated parameters, ready to run."""

    def __init__(self, params: dict[str, Any]):
        self.params = params

    @abstractmethod
    async def execute(self, signal: asyncio.Event) -> ToolResult:
        """
        Run the tool.

        Args:
            signal: Cancellation signal. Implementations should stop early
                    and return a CANCELLED error once it is set.
        """
        ...


class Tool(ABC):
    """
    Base class for a tool the CLI exposes.

    Subclasses set name/description/kind and implement create_invocation().
    validate_params() may be overridden to reject bad input before an
    invocation is created.
    """

    # Subclasses must set these
    name: str = ""
    description: str = ""
    kind: ToolKind = ToolKind.OTHER

    def validate_params(self, params: dict[str, Any]) -> str | None:
        """Return an error message for invalid params, or None."""
        return None

    @abstractmethod
    def create_invocation(self, params: dict[str, Any]) -> ToolInvocation:
        ...

    def build(self, params: dict[str, Any]) -> ToolInvocation:
        """Validate params and return an invocation. Raises ValueError on bad params."""
        if not isinstance(params, dict):
            raise ValueError(f"Parameters for '{self.name}' must be an object")
        error = self.validate_params(params)
        if error:
            raise ValueError(error)
        return self.create_invocation(params)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
