import asyncio
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from toolport.config import CliArgs, load_cli_config  # noqa: E402
from toolport.tools import Tool, ToolInvocation, ToolRegistry, ToolResult  # noqa: E402


class FakeInvocation(ToolInvocation):
    def __init__(self, params, execute_fn):
        super().__init__(params)
        self._execute_fn = execute_fn
        self.signal: asyncio.Event | None = None

    async def execute(self, signal):
        self.signal = signal
        return self._execute_fn(self.params)


class FakeTool(Tool):
    """
    Tool whose outcome is fixed by the test.

    result: ToolResult returned by execute (or a callable params -> ToolResult)
    build_error / execute_error: raised from build() / execute() instead
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        result: ToolResult | Callable[[dict[str, Any]], ToolResult] | None = None,
        build_error: BaseException | None = None,
        execute_error: BaseException | None = None,
    ):
        self.name = name
        self.description = description
        self._result = result if result is not None else ToolResult(llm_content="ok")
        self._build_error = build_error
        self._execute_error = execute_error
        self.built_with: list[dict[str, Any]] = []
        self.invocations: list[FakeInvocation] = []

    def create_invocation(self, params):
        self.built_with.append(params)
        if self._build_error is not None:
            raise self._build_error

        def _execute(p):
            if self._execute_error is not None:
                raise self._execute_error
            return self._result(p) if callable(self._result) else self._result

        invocation = FakeInvocation(params, _execute)
        self.invocations.append(invocation)
        return invocation


class FakeConfig:
    """Stands in for Config: hands out a prepared registry."""

    def __init__(self, tools: list[Tool]):
        self.registry = ToolRegistry()
        for tool in tools:
            self.registry.register_tool(tool)

    def create_tool_registry(self) -> ToolRegistry:
        return self.registry


@pytest.fixture
def make_config(tmp_path):
    """Build a real Config rooted at tmp_path."""
    def _make(settings: dict | None = None, **argv) -> Any:
        return load_cli_config(settings or {}, "test-session", CliArgs(**argv), tmp_path)
    return _make


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Keep real settings files and version overrides out of tests."""
    monkeypatch.setenv("TOOLPORT_SYSTEM_SETTINGS_PATH", str(tmp_path / "no-system-settings.json"))
    monkeypatch.delenv("TOOLPORT_VERSION", raising=False)
    yield
