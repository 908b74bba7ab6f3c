"""MCP server exposing intent resolution."""

from canvasintent.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]
