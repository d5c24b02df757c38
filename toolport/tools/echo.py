"""
Echo tool, the minimal reference implementation.

Echoes back its input. Useful for checking that a client can reach the
server end to end:

    {"jsonrpc":"2.0","method":"tools/call","params":{"name":"echo","arguments":{"message":"hi"}},"id":2}
"""

from langchain_core.tools import StructuredTool


def echo(message: str = "") -> dict:
    return {"echoed": message, "length": len(message)}


def create_echo_tool() -> StructuredTool:
    return StructuredTool.from_function(
        func=echo,
        name="echo",
        description="Echoes back the input message. Useful for testing.",
    )
