"""Markdown and Mermaid views of a selection."""

import re
from typing import Iterable, Sequence

from canvasintent.graph import assign_groups, edges_within, group_members
from canvasintent.models import ConvertedNode, Document, Edge, NodeKind

SHORT_ID_LENGTH = 8
MERMAID_LABEL_LENGTH = 50


def convert_selection(document: Document, selection_ids: Iterable[str]) -> tuple[list[ConvertedNode], list[Edge]]:
    """Convert a selection for display, without loading any content.

    Unlike preprocessing, selected groups stay in the result next to
    their members and no mode filtering applies.
    """
    selected = document.in_document_order(selection_ids)
    group_ids = [node.id for node in selected if node.is_group]
    ids = {node.id for node in selected}
    for node in selected:
        if node.is_group:
            ids.update(member.id for member in group_members(document, node))

    group_of = assign_groups(document, group_ids)
    converted = []
    for node in document.in_document_order(ids):
        item = ConvertedNode.from_node(node)
        item.group_id = group_of.get(node.id)
        item.is_group_member = item.group_id is not None
        converted.append(item)
    return converted, edges_within(document, ids)


def short_id(node_id: str) -> str:
    return node_id[:SHORT_ID_LENGTH]


def truncate(text: str, max_length: int) -> str:
    """Single-line text, cut with an ellipsis past max_length."""
    single_line = text.replace("\n", " ").strip()
    if len(single_line) <= max_length:
        return single_line
    return single_line[: max_length - 3] + "..."


def sanitize_mermaid_label(text: str) -> str:
    """Escape characters Mermaid treats as syntax."""
    text = text.replace('"', "'").replace("[", "［").replace("]", "］")
    return re.sub(r"[<>{}]", "", text).strip()


def node_type_label(node: ConvertedNode) -> str:
    if node.kind == NodeKind.FILE:
        return "image" if node.is_image else "file"
    return node.kind.value


def node_reference(node: ConvertedNode) -> str:
    """Wiki-link style reference for file nodes, raw content otherwise."""
    if node.kind == NodeKind.FILE:
        name = node.display_name
        return f"![[{name}]]" if node.is_image else f"[[{name}]]"
    if node.kind == NodeKind.GROUP:
        return node.node.label or "(Unnamed Group)"
    return node.content or ""


def to_markdown(nodes: Sequence[ConvertedNode], edges: Sequence[Edge]) -> str:
    """Render nodes and their connections as Markdown.

    Args:
        nodes: Nodes in display order
        edges: Connections between those nodes

    Returns:
        Markdown text with one section per node and a connection list
    """
    lines = ["## Selected Canvas Nodes\n"]

    for node in nodes:
        lines.append(f"### Node: {short_id(node.id)}... ({node_type_label(node)})")
        lines.append("")
        if node.kind == NodeKind.TEXT:
            lines.append(node.content or "")
        elif node.kind == NodeKind.FILE:
            lines.append(node_reference(node))
            if node.file_path:
                lines.append(f"> Path: {node.file_path}")
        elif node.kind == NodeKind.LINK:
            lines.append(f"[{node.content}]({node.content})")
        elif node.kind == NodeKind.GROUP:
            lines.append(f"**Group:** {node_reference(node)}")
        lines.append("")

    if edges:
        lines.append("## Connections\n")
        for edge in edges:
            source, target = short_id(edge.from_node), short_id(edge.to_node)
            if edge.label:
                lines.append(f"- {source}... --[{edge.label}]--> {target}...")
            else:
                lines.append(f"- {source}... --> {target}...")
        lines.append("")

    return "\n".join(lines)


def to_mermaid(nodes: Sequence[ConvertedNode], edges: Sequence[Edge]) -> str:
    """Render nodes and edges as a fenced Mermaid flowchart."""
    lines = ["```mermaid", "graph LR"]

    for node in nodes:
        label = sanitize_mermaid_label(truncate(node_reference(node), MERMAID_LABEL_LENGTH))
        sid = short_id(node.id)
        if node.kind == NodeKind.GROUP:
            lines.append(f'    {sid}(("{label}"))')
        elif node.is_image:
            lines.append(f'    {sid}{{"{label}"}}')
        elif node.kind == NodeKind.LINK:
            lines.append(f'    {sid}[/"{label}"/]')
        else:
            lines.append(f'    {sid}["{label}"]')

    for edge in edges:
        source, target = short_id(edge.from_node), short_id(edge.to_node)
        if edge.label:
            lines.append(f'    {source} -->|"{sanitize_mermaid_label(edge.label)}"| {target}')
        else:
            lines.append(f"    {source} --> {target}")

    lines.append("```")
    return "\n".join(lines)
