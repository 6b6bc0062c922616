"""MCP tool surface."""

from __future__ import annotations

from .server import build_server, serve
from .tools import LocationToolset, ToolCallError, ToolResponse, tool_definitions

__all__ = [
    "LocationToolset",
    "ToolCallError",
    "ToolResponse",
    "build_server",
    "serve",
    "tool_definitions",
]
