"""Tests for the MCP server factory."""

import asyncio
import json

from canvasintent.server import create_mcp_server

from tests.factories import MemoryStore


def test_registers_tools(tmp_path, settings):
    canvas = tmp_path / "board.canvas"
    canvas.write_text(json.dumps({"nodes": [], "edges": []}), encoding="utf-8")

    server = create_mcp_server(canvas, MemoryStore(), settings)
    tools = asyncio.run(server.list_tools())

    assert {tool.name for tool in tools} == {"nodes", "resolve", "edit", "render"}
