#!/usr/bin/env python3
"""SteamID MCP Server - SteamID conversion via Model Context Protocol.

This is the main entry point for the server. It loads configuration,
imports endpoint modules so their tools register, and handles tool calls.
"""

import asyncio
import importlib
import logging
import os
import pkgutil
import sys
from typing import Any

from dotenv import load_dotenv
from mcp.server import Server, NotificationOptions
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent, ImageContent, EmbeddedResource

from steamid_mcp import __version__
from steamid_mcp.config import Settings
from steamid_mcp.endpoints.base import EndpointManager


logger = logging.getLogger(__name__)

SERVER_NAME = "steamid-mcp-server"

server = Server(SERVER_NAME)

endpoint_manager: EndpointManager | None = None


def configure_logging(level: str) -> None:
    """Log to stderr only; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def discover_endpoints() -> None:
    """
    Import every module in the steamid_mcp.endpoints package.

    Importing a module defines its endpoint classes, which registers their
    tools through the metaclass.
    """
    import steamid_mcp.endpoints as endpoints_package

    package_path = os.path.dirname(endpoints_package.__file__)

    for _, module_name, _ in pkgutil.iter_modules([package_path]):
        if module_name == "base":
            continue
        try:
            importlib.import_module(f"steamid_mcp.endpoints.{module_name}")
            logger.info(f"Loaded endpoint module: {module_name}")
        except Exception as e:
            logger.error(f"Failed to load endpoint module {module_name}: {e}")


@server.list_tools()
async def handle_list_tools() -> list[Tool]:
    """List all available SteamID tools."""
    if endpoint_manager is None:
        return []
    return endpoint_manager.get_all_tools()


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict[str, Any] | None
) -> list[TextContent | ImageContent | EmbeddedResource]:
    """Handle tool execution requests."""
    if endpoint_manager is None:
        raise RuntimeError("Endpoint manager not initialized")

    try:
        return await endpoint_manager.call_tool(name, arguments)
    except ValueError as e:
        return [TextContent(type="text", text=f"Error: {e}")]
    except Exception as e:
        logger.exception(f"Unexpected error executing tool {name}")
        return [TextContent(type="text", text=f"Unexpected error: {e}")]


async def run_server(settings: Settings) -> None:
    """Run the MCP server over stdio."""
    global endpoint_manager

    discover_endpoints()
    endpoint_manager = EndpointManager(settings)

    tool_count = len(endpoint_manager.get_all_tools())
    logger.info(f"Loaded {tool_count} tools from endpoint modules")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=SERVER_NAME,
                server_version=__version__,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def main() -> None:
    """Main entry point."""
    load_dotenv()

    try:
        settings = Settings.from_env()
    except ValueError as e:
        configure_logging("INFO")
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(settings.log_level)

    try:
        asyncio.run(run_server(settings))
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.exception(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
