"""Group membership derived from bounding-box containment.

Membership is never stored: it is recomputed from geometry on every
call, so a moved node or resized group needs no invalidation.
"""

from typing import Iterable, Optional, Sequence

import numpy as np

from canvasintent.models import Document, Node


def bbox_array(nodes: Sequence[Node]) -> np.ndarray:
    """Stack node boxes into an (n, 4) array of [min_x, min_y, max_x, max_y]."""
    if not nodes:
        return np.zeros((0, 4), dtype=np.float64)
    return np.array(
        [[b.min_x, b.min_y, b.max_x, b.max_y] for b in (n.bbox for n in nodes)],
        dtype=np.float64,
    )


def containment_matrix(groups: Sequence[Node], nodes: Sequence[Node]) -> np.ndarray:
    """Build a boolean matrix: result[g, n] = True when groups[g] encloses nodes[n].

    Enclosure is inclusive on all four edges. Group nodes are never
    members, even when their geometry nests inside another group.
    """
    outer = bbox_array(groups)[:, None, :]
    inner = bbox_array(nodes)[None, :, :]
    matrix = (
        (inner[..., 0] >= outer[..., 0])
        & (inner[..., 1] >= outer[..., 1])
        & (inner[..., 2] <= outer[..., 2])
        & (inner[..., 3] <= outer[..., 3])
    )
    is_group = np.array([n.is_group for n in nodes], dtype=bool)
    if is_group.size:
        matrix[:, is_group] = False
    return matrix


def group_members(document: Document, group: Node) -> list[Node]:
    """Non-group nodes enclosed by group, in document order."""
    nodes = list(document.nodes)
    matrix = containment_matrix([group], nodes)
    return [node for node, inside in zip(nodes, matrix[0]) if inside and node.id != group.id]


def assign_groups(document: Document, group_ids: Optional[Iterable[str]] = None) -> dict[str, str]:
    """Map every enclosed non-group node id to one enclosing group id.

    Args:
        document: Canvas snapshot
        group_ids: Restrict candidates to these groups (default: all groups)

    Returns:
        node id -> group id. When several candidate groups enclose a node,
        the group that comes last in document order wins.
    """
    if group_ids is None:
        groups = document.groups
    else:
        groups = [n for n in document.in_document_order(group_ids) if n.is_group]
    if not groups:
        return {}

    nodes = list(document.nodes)
    matrix = containment_matrix(groups, nodes)
    assignment: dict[str, str] = {}
    # Rows follow document order, so later rows overwrite earlier ones
    for g, group in enumerate(groups):
        for n in np.flatnonzero(matrix[g]):
            assignment[nodes[n].id] = group.id
    return assignment


def containing_group(
    document: Document, node_id: str, group_ids: Optional[Iterable[str]] = None
) -> Optional[Node]:
    """The group a node belongs to, or None."""
    group_id = assign_groups(document, group_ids).get(node_id)
    return document.get(group_id) if group_id else None
