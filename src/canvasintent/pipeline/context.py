"""Serialization of leftover nodes into one context block."""

from typing import Iterable, Sequence

from canvasintent.models import ConvertedNode, NodeKind
from canvasintent.utils.filetypes import file_name

CONTEXT_SEPARATOR = "\n\n---\n\n"


def render_context_block(node: ConvertedNode) -> str | None:
    """Render one node with its kind header, or None if it has no content."""
    if node.kind == NodeKind.TEXT and node.content and node.content.strip():
        return f"[Text Node]\n{node.content}"
    if node.kind == NodeKind.FILE and node.is_markdown and (node.file_content or "").strip():
        return f"[File: {file_name(node.file_path or 'file')}]\n{node.file_content}"
    if node.kind == NodeKind.FILE and node.is_pdf and node.pdf_base64:
        return f"[PDF: {file_name(node.file_path or 'file.pdf')}] (Content provided as inline PDF attachment)"
    if node.kind == NodeKind.LINK and node.content:
        block = f"[Link: {node.content}]"
        if node.node.label:
            block += f"\n{node.node.label}"
        return block
    return None


def build_context_text(nodes: Sequence[ConvertedNode], excluded_ids: Iterable[str]) -> str:
    """Join every remaining non-image node into one block, in node order."""
    excluded = set(excluded_ids)
    parts = []
    for node in nodes:
        if node.is_image or node.id in excluded:
            continue
        block = render_context_block(node)
        if block is not None:
            parts.append(block)
    return CONTEXT_SEPARATOR.join(parts)
