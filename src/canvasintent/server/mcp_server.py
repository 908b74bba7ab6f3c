"""FastMCP server implementation for canvasintent."""

import json
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from canvasintent.codecs import PillowImageCodec
from canvasintent.config import Settings, get_settings
from canvasintent.models import EditContext, Mode
from canvasintent.pipeline import IntentResolver
from canvasintent.protocols import ContentStore
from canvasintent.render import convert_selection, to_markdown, to_mermaid
from canvasintent.storage import load_canvas


def create_mcp_server(canvas_path: Path, store: ContentStore, settings: Settings | None = None) -> FastMCP:
    """Create an MCP server for a specific canvas.

    Design: 1 process = 1 canvas + vault. The canvas file is re-read on
    every call so geometry edits made in between are always reflected.

    Args:
        canvas_path: Path to the .canvas file to serve
        store: Content store for the vault the canvas lives in
        settings: Limits and defaults (environment settings if omitted)

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="canvasintent",
    )

    settings = settings or get_settings()
    resolver = IntentResolver(store, PillowImageCodec(), settings)

    @mcp.tool()
    def nodes() -> str:
        """List the canvas nodes.

        Returns:
            One line per node: id, kind and a short preview
        """
        document = load_canvas(canvas_path)
        if not document.nodes:
            return "Canvas is empty"

        lines = []
        for node in document.nodes:
            preview = node.text or node.file or node.url or node.label or ""
            preview = preview[:60].replace("\n", " ")
            lines.append(f"{node.id:<20} {node.kind.value:<6} {preview}")
        return "\n".join(lines)

    @mcp.tool()
    def resolve(selection: list[str], instruction: str = "", mode: str = "chat") -> str:
        """Resolve a selection into instruction, role-labeled images and context.

        Args:
            selection: Selected node ids (groups are expanded to their members)
            instruction: What the user typed; may be empty
            mode: One of chat, image, node

        Returns:
            JSON object with instruction, images (roles only), context_text,
            warnings and can_generate
        """
        try:
            mode_value = Mode(mode)
        except ValueError:
            return f"Error: unknown mode {mode!r} (expected chat, image or node)"
        document = load_canvas(canvas_path)
        intent = resolver.resolve(document, selection, instruction, mode_value)
        return json.dumps(intent.to_dict(include_image_data=False), indent=2, ensure_ascii=False)

    @mcp.tool()
    def edit(
        node_id: str,
        selected_text: str,
        pre_text: str = "",
        post_text: str = "",
        instruction: str = "",
    ) -> str:
        """Gather neighborhood context for editing a text span inside one node.

        Args:
            node_id: Node being edited
            selected_text: The span to rewrite
            pre_text: Text before the span within the node
            post_text: Text after the span within the node
            instruction: What the user typed; may be empty

        Returns:
            JSON object with upstream/downstream context, images and can_edit
        """
        document = load_canvas(canvas_path)
        context = EditContext(node_id, selected_text, pre_text, post_text)
        intent = resolver.resolve_for_edit(document, context, instruction)
        return json.dumps(intent.to_dict(include_image_data=False), indent=2, ensure_ascii=False)

    @mcp.tool()
    def render(selection: list[str], format: str = "markdown") -> str:
        """Render a selection as Markdown or a Mermaid flowchart.

        Args:
            selection: Selected node ids
            format: "markdown" or "mermaid"
        """
        nodes, edges = convert_selection(load_canvas(canvas_path), selection)
        if format == "mermaid":
            return to_mermaid(nodes, edges)
        return to_markdown(nodes, edges)

    return mcp
