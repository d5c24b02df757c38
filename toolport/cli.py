"""
toolport command line.

Usage:
    # Serve the CLI's tools to an MCP client over stdio
    toolport server

    # Show which tools `server` would expose in this directory
    toolport tools

Logging goes to stderr; in `server` mode stdout carries only MCP messages.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from toolport.adapter import create_adapter, start_server, tool_description

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolport",
        description="Expose the toolport CLI's built-in tools to other processes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  toolport server
  toolport tools --verbose
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")

    subcommands = parser.add_subparsers(dest="command", required=True)
    subcommands.add_parser("server", help="Start an MCP server on stdio exposing the CLI's tools")
    subcommands.add_parser("tools", help="List the tools the MCP server would expose")
    return parser


def list_tools(cwd: str) -> int:
    adapter = create_adapter(cwd)
    registry = adapter.config.create_tool_registry()

    print(f"\nTools exposed in {adapter.config.target_dir} ({len(registry)}):\n")
    for tool in registry.get_all_tools():
        print(f"  {tool.name:<20} {tool_description(tool)}")
    print()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    cwd = os.getcwd()
    if args.command == "tools":
        return list_tools(cwd)

    asyncio.run(start_server(cwd))
    return 0


if __name__ == "__main__":
    sys.exit(main())
