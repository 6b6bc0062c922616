"""Stdio MCP server exposing the location tools."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .tools import ToolCallError, tool_definitions

if TYPE_CHECKING:
    from .tools import LocationToolset

log = getLogger(__name__)

SERVER_NAME: Final[str] = "locations-mcp-server"


def build_server(toolset: LocationToolset) -> Server[Any]:
    server: Server[Any] = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tool_definitions()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        response = await toolset.call(name, arguments)
        if response.is_error:
            # The server turns handler exceptions into isError results carrying str(exc).
            raise ToolCallError(response.text)
        return [types.TextContent(type="text", text=response.text)]

    return server


async def serve(toolset: LocationToolset) -> None:
    server = build_server(toolset)
    log.info("Starting %s on stdio", SERVER_NAME)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
