"""MCP tool server for snippet analysis."""

from .server import create_server, mcp

__all__ = ["create_server", "mcp"]
