"""Reader and writer for JSON Canvas (.canvas) files."""

import json
import logging
from pathlib import Path
from typing import Any

from canvasintent.errors import CanvasFormatError
from canvasintent.models import Document, Edge, Node, NodeKind
from canvasintent.storage.schema import (
    EDGE_REQUIRED_FIELDS,
    NODE_PAYLOAD_FIELDS,
    NODE_REQUIRED_FIELDS,
)

logger = logging.getLogger(__name__)


def load_canvas(path: Path | str) -> Document:
    """Load a .canvas file into a Document.

    Args:
        path: Path to the .canvas JSON file

    Returns:
        Document with nodes and edges in file order

    Raises:
        CanvasFormatError: If the file is unreadable or not JSON Canvas
    """
    canvas_path = Path(path)
    try:
        raw = canvas_path.read_text(encoding="utf-8")
    except OSError as e:
        raise CanvasFormatError(f"Cannot read {canvas_path}: {e}") from e
    try:
        data = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError as e:
        raise CanvasFormatError(f"{canvas_path}: invalid JSON: {e}") from e
    return parse_canvas(data)


def parse_canvas(data: Any) -> Document:
    """Build a Document from parsed JSON Canvas data.

    Nodes of unknown type and edges with a missing endpoint are skipped
    with a warning; structurally broken nodes/edges raise.
    """
    if not isinstance(data, dict):
        raise CanvasFormatError("Invalid canvas: not an object")

    nodes: list[Node] = []
    for i, raw_node in enumerate(data.get("nodes") or []):
        node = _parse_node(i, raw_node)
        if node is not None:
            nodes.append(node)

    node_ids = {node.id for node in nodes}
    if len(node_ids) != len(nodes):
        raise CanvasFormatError("Invalid canvas: duplicate node ids")

    edges: list[Edge] = []
    for i, raw_edge in enumerate(data.get("edges") or []):
        if not isinstance(raw_edge, dict):
            raise CanvasFormatError(f"Edge {i}: not an object")
        missing = [key for key in EDGE_REQUIRED_FIELDS if not raw_edge.get(key)]
        if missing:
            raise CanvasFormatError(f"Edge {i}: missing {', '.join(missing)}")
        if raw_edge["fromNode"] not in node_ids or raw_edge["toNode"] not in node_ids:
            logger.warning(f"Skipping edge {raw_edge['id']}: endpoint not in canvas")
            continue
        edges.append(
            Edge(
                id=str(raw_edge["id"]),
                from_node=str(raw_edge["fromNode"]),
                to_node=str(raw_edge["toNode"]),
                label=raw_edge.get("label"),
            )
        )

    return Document(nodes=tuple(nodes), edges=tuple(edges))


def _parse_node(index: int, raw: Any) -> Node | None:
    if not isinstance(raw, dict):
        raise CanvasFormatError(f"Node {index}: not an object")
    missing = [key for key in NODE_REQUIRED_FIELDS if raw.get(key) is None]
    if missing:
        raise CanvasFormatError(f"Node {index}: missing {', '.join(missing)}")

    node_type = raw.get("type", "text")
    if node_type not in NODE_PAYLOAD_FIELDS:
        logger.warning(f"Skipping node {raw['id']}: unknown type {node_type!r}")
        return None

    try:
        return Node(
            id=str(raw["id"]),
            kind=NodeKind(node_type),
            x=float(raw["x"]),
            y=float(raw["y"]),
            width=float(raw["width"]),
            height=float(raw["height"]),
            text=raw.get("text") if node_type == "text" else None,
            file=raw.get("file") if node_type == "file" else None,
            url=raw.get("url") if node_type == "link" else None,
            label=raw.get("label") if node_type in ("group", "link") else None,
        )
    except (TypeError, ValueError) as e:
        raise CanvasFormatError(f"Node {index}: {e}") from e


def dump_canvas(document: Document) -> dict:
    """Serialize a Document back to JSON Canvas data."""
    nodes = []
    for node in document.nodes:
        entry: dict[str, Any] = {
            "id": node.id,
            "type": node.kind.value,
            "x": node.x,
            "y": node.y,
            "width": node.width,
            "height": node.height,
        }
        payload_field = NODE_PAYLOAD_FIELDS[node.kind.value]
        value = {"text": node.text, "file": node.file, "url": node.url, "label": node.label}[payload_field]
        if value is not None:
            entry[payload_field] = value
        if node.kind == NodeKind.LINK and node.label:
            entry["label"] = node.label
        nodes.append(entry)

    edges = []
    for edge in document.edges:
        entry = {"id": edge.id, "fromNode": edge.from_node, "toNode": edge.to_node}
        if edge.label:
            entry["label"] = edge.label
        edges.append(entry)

    return {"nodes": nodes, "edges": edges}


def save_canvas(document: Document, path: Path | str) -> None:
    """Write a Document to a .canvas file."""
    Path(path).write_text(json.dumps(dump_canvas(document), indent="\t"), encoding="utf-8")
