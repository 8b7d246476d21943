"""MCP server for the office document reader."""

from officereader.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]
