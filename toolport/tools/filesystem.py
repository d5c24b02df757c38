"""
Filesystem tools confined to the configured target directory.

Paths may be absolute or relative to the target directory; anything that
resolves outside of it is rejected.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from toolport.tools.base import Tool, ToolErrorType, ToolInvocation, ToolKind, ToolResult

logger = logging.getLogger(__name__)

DEFAULT_READ_LIMIT = 2000


def resolve_in_workspace(target_dir: Path, path: str) -> Path | None:
    """Resolve path against target_dir. Returns None if it escapes the workspace."""
    root = target_dir.resolve()
    candidate = (root / path).resolve()
    if candidate == root or root in candidate.parents:
        return candidate
    return None


class _WorkspaceTool(Tool):

    def __init__(self, target_dir: Path):
        self.target_dir = Path(target_dir)

    def _check_path(self, params: dict[str, Any], key: str = "path") -> str | None:
        path = params.get(key)
        if not isinstance(path, str) or not path.strip():
            return f"'{key}' is required and must be a non-empty string"
        if resolve_in_workspace(self.target_dir, path) is None:
            return f"Path must be within the workspace directory ({self.target_dir}): {path}"
        return None


class ListDirectoryInvocation(ToolInvocation):

    def __init__(self, target_dir: Path, params: dict[str, Any]):
        super().__init__(params)
        self.target_dir = target_dir

    async def execute(self, signal: asyncio.Event) -> ToolResult:
        if signal.is_set():
            return ToolResult.failure("Listing was cancelled", ToolErrorType.CANCELLED)

        directory = resolve_in_workspace(self.target_dir, self.params.get("path", "."))
        if not directory.is_dir():
            return ToolResult.failure(f"Not a directory: {directory}", ToolErrorType.FILE_NOT_FOUND)

        entries = sorted(directory.iterdir(), key=lambda p: (not p.is_dir(), p.name.lower()))
        if not self.params.get("show_hidden", False):
            entries = [p for p in entries if not p.name.startswith(".")]

        lines = [f"[DIR] {p.name}" if p.is_dir() else p.name for p in entries]
        listing = "\n".join(lines) if lines else "(empty)"
        return ToolResult(
            llm_content=f"Directory listing for {directory}:\n{listing}",
            return_display=f"Listed {len(entries)} item(s).",
        )


class ListDirectoryTool(_WorkspaceTool):
    name = "list_directory"
    description = (
        "Lists the names of files and subdirectories directly within a directory. "
        "'path' defaults to the workspace root; set 'show_hidden' to include dotfiles."
    )
    kind = ToolKind.READ

    def validate_params(self, params: dict[str, Any]) -> str | None:
        if "path" not in params:
            return None
        return self._check_path(params)

    def create_invocation(self, params: dict[str, Any]) -> ToolInvocation:
        return ListDirectoryInvocation(self.target_dir, params)


class ReadFileInvocation(ToolInvocation):

    def __init__(self, target_dir: Path, params: dict[str, Any]):
        super().__init__(params)
        self.target_dir = target_dir

    async def execute(self, signal: asyncio.Event) -> ToolResult:
        if signal.is_set():
            return ToolResult.failure("Read was cancelled", ToolErrorType.CANCELLED)

        path = resolve_in_workspace(self.target_dir, self.params["path"])
        if not path.is_file():
            return ToolResult.failure(f"File not found: {path}", ToolErrorType.FILE_NOT_FOUND)

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            return ToolResult.failure(f"Cannot display content of binary file: {path}")

        offset = self.params.get("offset")
        limit = self.params.get("limit")
        if offset is None and limit is None:
            return ToolResult(llm_content=text, return_display=f"Read {path.name}")

        lines = text.splitlines(keepends=True)
        start = offset or 0
        if start >= len(lines):
            if not lines:
                return ToolResult(llm_content="", return_display=f"Read {path.name}")
            return ToolResult.failure(
                f"Offset {start} is beyond the end of {path.name} ({len(lines)} lines)",
                ToolErrorType.INVALID_PARAMS,
            )
        end = start + (limit or DEFAULT_READ_LIMIT)
        content = "".join(lines[start:end])
        if end < len(lines):
            content = (
                f"[File content truncated: showing lines {start + 1}-{end} "
                f"of {len(lines)} total lines.]\n{content}"
            )
        return ToolResult(llm_content=content, return_display=f"Read lines {start + 1}-{min(end, len(lines))} of {path.name}")


class ReadFileTool(_WorkspaceTool):
    name = "read_file"
    description = (
        "Reads and returns the content of a text file in the workspace. "
        "Use 'offset' (0-based line) and 'limit' (line count) to read part of a large file."
    )
    kind = ToolKind.READ

    def validate_params(self, params: dict[str, Any]) -> str | None:
        error = self._check_path(params)
        if error:
            return error
        for key in ("offset", "limit"):
            value = params.get(key)
            if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
                return f"'{key}' must be a non-negative integer"
        if params.get("limit") == 0:
            return "'limit' must be greater than zero"
        return None

    def create_invocation(self, params: dict[str, Any]) -> ToolInvocation:
        return ReadFileInvocation(self.target_dir, params)


class WriteFileInvocation(ToolInvocation):

    def __init__(self, target_dir: Path, params: dict[str, Any]):
        super().__init__(params)
        self.target_dir = target_dir

    async def execute(self, signal: asyncio.Event) -> ToolResult:
        if signal.is_set():
            return ToolResult.failure("Write was cancelled", ToolErrorType.CANCELLED)

        path = resolve_in_workspace(self.target_dir, self.params["path"])
        if path.is_dir():
            return ToolResult.failure(f"Path is a directory, not a file: {path}")

        created = not path.exists()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.params["content"], encoding="utf-8")
        logger.info(f"Wrote {len(self.params['content'])} chars to {path}")

        verb = "created" if created else "overwrote"
        return ToolResult(llm_content=f"Successfully {verb} file: {path}", return_display=f"Wrote {path.name}")


class WriteFileTool(_WorkspaceTool):
    name = "write_file"
    description = "Writes content to a file in the workspace, creating parent directories as needed."
    kind = ToolKind.EDIT

    def validate_params(self, params: dict[str, Any]) -> str | None:
        error = self._check_path(params)
        if error:
            return error
        if not isinstance(params.get("content"), str):
            return "'content' is required and must be a string"
        return None

    def create_invocation(self, params: dict[str, Any]) -> ToolInvocation:
        return WriteFileInvocation(self.target_dir, params)
