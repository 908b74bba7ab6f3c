"""Selection preprocessing: group expansion, mode filtering, loading."""

import logging
from typing import Iterable

from canvasintent.graph import assign_groups, group_members
from canvasintent.models import (
    ConvertedNode,
    Document,
    ImageLoadConfig,
    Mode,
    NodeKind,
    PreprocessResult,
)
from canvasintent.pipeline.loading import ContentLoader
from canvasintent.utils.filetypes import FileKind, file_name

logger = logging.getLogger(__name__)

# File kinds that only make sense as text context
_CONTEXT_ONLY_KINDS = {FileKind.PDF, FileKind.MARKDOWN}


def expand_selection(document: Document, selection_ids: Iterable[str]) -> tuple[list[str], dict[str, str]]:
    """Replace selected groups by their members.

    Args:
        document: Canvas snapshot
        selection_ids: Ids the user selected (groups included)

    Returns:
        Tuple of (expanded non-group ids in document order,
        member id -> enclosing selected group id)
    """
    selected = document.in_document_order(selection_ids)
    group_ids = [node.id for node in selected if node.is_group]

    expanded = {node.id for node in selected if not node.is_group}
    for group_id in group_ids:
        group = document.get(group_id)
        expanded.update(member.id for member in group_members(document, group))

    ordered = [node.id for node in document.in_document_order(expanded)]
    return ordered, assign_groups(document, group_ids)


def is_included(node: ConvertedNode, mode: Mode) -> bool:
    """Apply the per-mode inclusion table to one node."""
    if node.kind == NodeKind.TEXT:
        return True
    if node.kind == NodeKind.LINK:
        return mode != Mode.IMAGE
    if node.kind == NodeKind.FILE:
        if node.file_kind == FileKind.IMAGE:
            return True
        if node.file_kind in _CONTEXT_ONLY_KINDS:
            return mode != Mode.IMAGE
        return False
    return False


def preprocess(
    document: Document,
    selection_ids: Iterable[str],
    mode: Mode,
    loader: ContentLoader,
    config: ImageLoadConfig,
) -> PreprocessResult:
    """Turn a raw selection into the effective node list.

    Args:
        document: Canvas snapshot (read only)
        selection_ids: Selected node ids, groups included
        mode: Active mode; decides which file kinds are kept
        loader: Loads markdown, PDF and image content
        config: Image compression parameters

    Returns:
        PreprocessResult; nothing here raises; every problem becomes a warning
    """
    mode = Mode(mode)
    selection_ids = list(selection_ids)
    result = PreprocessResult()

    for node_id in selection_ids:
        if node_id not in document:
            result.warnings.append(f"Selected node {node_id} not found in canvas")

    for node in document.in_document_order(selection_ids):
        if node.is_group:
            result.group_labels[node.id] = node.label or ""

    expanded_ids, group_of = expand_selection(document, selection_ids)

    for node_id in expanded_ids:
        converted = ConvertedNode.from_node(document.get(node_id))
        converted.group_id = group_of.get(node_id)
        converted.is_group_member = converted.group_id is not None

        if is_included(converted, mode):
            result.effective_nodes.append(converted)
        elif converted.kind == NodeKind.LINK:
            result.skipped_files.append(f"[Link] {converted.node.url or ''}")
        else:
            result.skipped_files.append(converted.file_path or converted.id)

    if result.skipped_files:
        names = ", ".join(
            entry if entry.startswith("[Link]") else file_name(entry) for entry in result.skipped_files
        )
        result.warnings.append(
            f"Skipped {len(result.skipped_files)} file(s) in {mode.value} mode: {names}"
        )

    for converted in result.effective_nodes:
        loader.fill(converted, config, result.warnings)

    logger.debug(
        f"Preprocessed {len(selection_ids)} selected -> {len(result.effective_nodes)} effective "
        f"({result.image_count} images, {result.text_count} other)"
    )
    return result
