"""Semantic role assignment for image nodes.

Priority, first match wins:

1. a non-empty label on an incoming edge
2. the text of an upstream Text node
3. the label of the selected group enclosing the image
4. ``DEFAULT_ROLE``
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from canvasintent.graph import EdgeIndex
from canvasintent.models import ConvertedNode, Edge, NodeKind

DEFAULT_ROLE = "Visual Reference"
MAX_ROLE_LENGTH = 50
ELLIPSIS = "..."

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]+")


def normalize_role(text: str, max_length: int = MAX_ROLE_LENGTH) -> str:
    """Collapse control characters to spaces and truncate with an ellipsis."""
    cleaned = _CONTROL_CHARS.sub(" ", text).strip()
    if len(cleaned) <= max_length:
        return cleaned
    return cleaned[: max_length - len(ELLIPSIS)] + ELLIPSIS


@dataclass(frozen=True)
class RoleAssignment:
    roles: dict[str, str] = field(default_factory=dict)
    # Text nodes whose content became some image's role
    label_source_ids: frozenset[str] = frozenset()

    def role_for(self, node_id: str) -> str:
        return self.roles.get(node_id, DEFAULT_ROLE)


def assign_roles(
    nodes: Sequence[ConvertedNode],
    edges: Iterable[Edge],
    group_labels: Mapping[str, str],
    excluded_sources: Iterable[str] = (),
    max_length: int = MAX_ROLE_LENGTH,
) -> RoleAssignment:
    """Assign a role string to every image node.

    Args:
        nodes: Effective nodes, document order
        edges: Edges restricted to the effective nodes, document order
        group_labels: group id -> label for groups in the original selection
        excluded_sources: Text node ids that may not serve as role sources
        max_length: Maximum role length

    Returns:
        RoleAssignment covering every image node
    """
    node_map = {node.id: node for node in nodes}
    index = EdgeIndex.build(edges)
    excluded = frozenset(excluded_sources)

    roles: dict[str, str] = {}
    label_sources: set[str] = set()

    for node in nodes:
        if not node.is_image:
            continue
        incoming = index.incoming_to(node.id)

        role = None
        for edge in incoming:
            candidate = normalize_role(edge.label or "", max_length)
            if candidate:
                role = candidate
                break

        if role is None:
            seen: set[str] = set()
            for edge in incoming:
                if edge.from_node in seen:
                    continue
                seen.add(edge.from_node)
                source = node_map.get(edge.from_node)
                if (
                    source is not None
                    and source.kind == NodeKind.TEXT
                    and source.id not in excluded
                    and normalize_role(source.content or "", max_length)
                ):
                    role = normalize_role(source.content, max_length)
                    label_sources.add(source.id)
                    break

        if role is None and node.is_group_member:
            label = normalize_role(group_labels.get(node.group_id or "", ""), max_length)
            if label:
                role = label

        roles[node.id] = role or DEFAULT_ROLE

    return RoleAssignment(roles=roles, label_source_ids=frozenset(label_sources))
