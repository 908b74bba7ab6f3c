"""Parsing of model-generated canvas structures (node mode output).

These helpers only ever touch the model's response; the source canvas is
not read or modified here.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from canvasintent.errors import CanvasFormatError

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


@dataclass
class SanitizeStats:
    removed_empty_nodes: int = 0
    removed_orphan_nodes: int = 0
    removed_invalid_edges: int = 0


def extract_canvas_json(response: str) -> dict:
    """Pull canvas JSON out of a model response.

    Accepts raw JSON, JSON inside a ```json fence, or JSON surrounded by
    prose (first "{" to last "}").

    Raises:
        CanvasFormatError: If no valid canvas structure can be parsed
    """
    text = response.strip()
    match = _CODE_BLOCK.search(text)
    if match:
        text = match.group(1).strip()
    else:
        first, last = text.find("{"), text.rfind("}")
        if first != -1 and last > first:
            text = text[first : last + 1]

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CanvasFormatError(f"JSON parse error: {e}") from e

    return validate_canvas_data(data)


def validate_canvas_data(data: Any) -> dict:
    """Check the structure and fill defaults (edges=[], node type='text')."""
    if not isinstance(data, dict):
        raise CanvasFormatError("Invalid JSON: not an object")
    if not isinstance(data.get("nodes"), list):
        raise CanvasFormatError("Invalid structure: missing nodes array")
    if not isinstance(data.get("edges"), list):
        data["edges"] = []

    for i, node in enumerate(data["nodes"]):
        if not isinstance(node, dict):
            raise CanvasFormatError(f"Node {i}: not an object")
        if not node.get("id"):
            raise CanvasFormatError(f"Node {i}: missing id")
        if node.get("x") is None or node.get("y") is None:
            raise CanvasFormatError(f"Node {i}: missing x/y coordinates")
        if not node.get("width") or not node.get("height"):
            raise CanvasFormatError(f"Node {i}: missing width/height")
        node.setdefault("type", "text")

    node_ids = {node["id"] for node in data["nodes"]}
    for i, edge in enumerate(data["edges"]):
        if not isinstance(edge, dict):
            raise CanvasFormatError(f"Edge {i}: not an object")
        if not edge.get("id"):
            raise CanvasFormatError(f"Edge {i}: missing id")
        if not edge.get("fromNode") or not edge.get("toNode"):
            raise CanvasFormatError(f"Edge {i}: missing fromNode/toNode")
        for end in ("fromNode", "toNode"):
            if edge[end] not in node_ids:
                logger.warning(f'Edge {i}: {end} "{edge[end]}" not found in nodes')

    return data


def sanitize_canvas_data(data: dict, remove_orphan_nodes: bool = True) -> tuple[dict, SanitizeStats]:
    """Drop empty text nodes, dangling edges and (optionally) orphans.

    Group nodes are never treated as orphans. When no edges survive, all
    nodes are kept since an unconnected list may be intentional.

    Returns:
        Tuple of (new canvas data, SanitizeStats)
    """
    stats = SanitizeStats()

    nodes = []
    for node in data.get("nodes", []):
        if node.get("type") == "text" and not (node.get("text") or "").strip():
            stats.removed_empty_nodes += 1
            logger.debug(f"Removed empty text node {node.get('id')}")
            continue
        nodes.append(node)

    valid_ids = {node["id"] for node in nodes}
    edges = []
    for edge in data.get("edges", []):
        if edge.get("fromNode") in valid_ids and edge.get("toNode") in valid_ids:
            edges.append(edge)
        else:
            stats.removed_invalid_edges += 1
            logger.debug(f"Removed invalid edge {edge.get('id')}")

    if remove_orphan_nodes and edges:
        connected = {edge["fromNode"] for edge in edges} | {edge["toNode"] for edge in edges}
        kept = []
        for node in nodes:
            if node.get("type") == "group" or node["id"] in connected:
                kept.append(node)
            else:
                stats.removed_orphan_nodes += 1
        nodes = kept

    return {"nodes": nodes, "edges": edges}, stats
