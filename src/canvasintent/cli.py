"""CLI entry point for canvasintent."""

import argparse
import json
import logging
import sys
from pathlib import Path

from canvasintent.codecs import PillowImageCodec
from canvasintent.config import get_settings
from canvasintent.errors import CanvasIntentError
from canvasintent.models import EditContext, Mode, NodeKind
from canvasintent.pipeline import IntentResolver
from canvasintent.protocols import ContentStore
from canvasintent.render import convert_selection, to_markdown, to_mermaid
from canvasintent.storage import load_canvas
from canvasintent.stores import get_store
from canvasintent.structure import extract_canvas_json, sanitize_canvas_data

logger = logging.getLogger(__name__)


def open_store(vault: str | None, canvas: str) -> ContentStore:
    """Open the vault store; defaults to the folder holding the canvas."""
    source = Path(vault) if vault else Path(canvas).parent
    store = get_store(source)
    if store is None:
        logger.error(f"Cannot open vault: {source}")
        logger.error("Supported vaults: folders, .zip files")
        sys.exit(1)
    return store


def print_json(data: dict) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def resolve(canvas: str, vault: str | None, selection: list[str], mode: str, user_input: str, as_json: bool) -> None:
    """Resolve a selection and print the payload.

    Args:
        canvas: Path to the .canvas file
        vault: Vault root (folder or zip); defaults to the canvas folder
        selection: Selected node ids
        mode: chat, image or node
        user_input: Typed instruction (may be empty)
        as_json: Print JSON instead of a readable summary
    """
    settings = get_settings()
    document = load_canvas(canvas)
    resolver = IntentResolver(open_store(vault, canvas), PillowImageCodec(), settings)
    intent = resolver.resolve(document, selection, user_input, Mode(mode))

    if as_json:
        print_json(intent.to_dict(include_image_data=False))
        return

    for warning in intent.warnings:
        logger.warning(f"! {warning}")
    print(f"Instruction: {intent.instruction}")
    print(f"")
    print(f"Images ({len(intent.images)}):")
    for image in intent.images:
        print(f"  {image.node_id}: {image.role} [{image.mime_type}]")
    print(f"")
    print(f"Context:")
    print(intent.context_text or "  (none)")
    print(f"")
    print(f"Can generate: {'yes' if intent.can_generate else 'no'}")


def edit(canvas: str, vault: str | None, context: EditContext, user_input: str) -> None:
    """Resolve an in-place edit and print the payload as JSON."""
    settings = get_settings()
    document = load_canvas(canvas)
    resolver = IntentResolver(open_store(vault, canvas), PillowImageCodec(), settings)
    intent = resolver.resolve_for_edit(document, context, user_input)
    print_json(intent.to_dict(include_image_data=False))


def render(canvas: str, selection: list[str], output_format: str) -> None:
    """Print a selection as Markdown or Mermaid."""
    nodes, edges = convert_selection(load_canvas(canvas), selection)
    print(to_mermaid(nodes, edges) if output_format == "mermaid" else to_markdown(nodes, edges))


def parse(response_file: str, keep_orphans: bool) -> None:
    """Parse a model response into sanitized canvas JSON."""
    text = Path(response_file).read_text(encoding="utf-8")
    data, stats = sanitize_canvas_data(extract_canvas_json(text), remove_orphan_nodes=not keep_orphans)
    logger.info(
        f"Removed {stats.removed_empty_nodes} empty nodes, "
        f"{stats.removed_orphan_nodes} orphan nodes, "
        f"{stats.removed_invalid_edges} invalid edges"
    )
    print_json(data)


def serve(canvas: str, vault: str | None, transport: str = "stdio") -> None:
    """Start MCP server for a canvas.

    Args:
        canvas: Path to .canvas file
        vault: Vault root (folder or zip)
        transport: Transport protocol (stdio or sse)
    """
    canvas_path = Path(canvas)
    if not canvas_path.exists():
        logger.error(f"Canvas not found: {canvas}")
        sys.exit(1)

    # Import here to avoid loading MCP unless needed
    from canvasintent.server import create_mcp_server

    from typing import cast, Literal

    logger.info(f"Serving {canvas} via {transport}")
    mcp = create_mcp_server(canvas_path, open_store(vault, canvas))
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def info(canvas: str) -> None:
    """Show information about a canvas."""
    canvas_path = Path(canvas)
    document = load_canvas(canvas_path)

    counts = {kind: 0 for kind in NodeKind}
    for node in document.nodes:
        counts[node.kind] += 1
    labeled = sum(1 for edge in document.edges if edge.label)

    print(f"Canvas: {canvas_path.name}")
    print(f"  Size: {canvas_path.stat().st_size / 1024:.1f} KB")
    print(f"")
    print(f"Nodes:")
    for kind, count in counts.items():
        print(f"  {kind.value}: {count}")
    print(f"  Total: {len(document.nodes)}")
    print(f"")
    print(f"Edges: {len(document.edges)} ({labeled} labeled)")


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="canvasintent",
        description="canvasintent - resolve canvas selections into model requests",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a multi-node selection",
    )
    resolve_parser.add_argument("canvas", help="Path to .canvas file")
    resolve_parser.add_argument("--vault", help="Vault folder or zip (default: canvas folder)")
    resolve_parser.add_argument(
        "-s", "--select", nargs="+", required=True, metavar="ID", help="Selected node ids"
    )
    resolve_parser.add_argument(
        "--mode",
        choices=[mode.value for mode in Mode],
        default="chat",
        help="Resolution mode (default: chat)",
    )
    resolve_parser.add_argument("-i", "--input", default="", help="Typed instruction")
    resolve_parser.add_argument("--json", action="store_true", help="Print JSON")

    # edit command
    edit_parser = subparsers.add_parser(
        "edit",
        help="Resolve an in-place edit of a text span",
    )
    edit_parser.add_argument("canvas", help="Path to .canvas file")
    edit_parser.add_argument("--vault", help="Vault folder or zip (default: canvas folder)")
    edit_parser.add_argument("--node", required=True, help="Id of the node being edited")
    edit_parser.add_argument("--selected", required=True, help="Selected text span")
    edit_parser.add_argument("--pre", default="", help="Text before the span")
    edit_parser.add_argument("--post", default="", help="Text after the span")
    edit_parser.add_argument("-i", "--input", default="", help="Typed instruction")

    # render command
    render_parser = subparsers.add_parser(
        "render",
        help="Render a selection as Markdown or Mermaid",
    )
    render_parser.add_argument("canvas", help="Path to .canvas file")
    render_parser.add_argument(
        "-s", "--select", nargs="+", required=True, metavar="ID", help="Selected node ids"
    )
    render_parser.add_argument(
        "--format",
        choices=["markdown", "mermaid"],
        default="markdown",
        help="Output format (default: markdown)",
    )

    # parse command
    parse_parser = subparsers.add_parser(
        "parse",
        help="Extract canvas JSON from a saved model response",
    )
    parse_parser.add_argument("response", help="File holding the model response")
    parse_parser.add_argument(
        "--keep-orphans", action="store_true", help="Keep nodes without edges"
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start MCP server for a canvas",
    )
    serve_parser.add_argument("canvas", help="Path to .canvas file")
    serve_parser.add_argument("--vault", help="Vault folder or zip (default: canvas folder)")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show information about a canvas",
    )
    info_parser.add_argument("canvas", help="Path to .canvas file")

    args = parser.parse_args()

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(message)s",
    )

    try:
        if args.command == "resolve":
            resolve(args.canvas, args.vault, args.select, args.mode, args.input, args.json)
        elif args.command == "edit":
            context = EditContext(args.node, args.selected, args.pre, args.post)
            edit(args.canvas, args.vault, context, args.input)
        elif args.command == "render":
            render(args.canvas, args.select, args.format)
        elif args.command == "parse":
            parse(args.response, args.keep_orphans)
        elif args.command == "serve":
            serve(args.canvas, args.vault, args.transport)
        elif args.command == "info":
            info(args.canvas)
    except CanvasIntentError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
