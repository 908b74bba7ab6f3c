"""Graph queries over a canvas document."""

from canvasintent.graph.containment import (
    assign_groups,
    containing_group,
    containment_matrix,
    group_members,
)
from canvasintent.graph.edges import EdgeIndex, edges_within
from canvasintent.graph.traversal import Direction, Neighbor, bfs_neighbors

__all__ = [
    "Direction",
    "EdgeIndex",
    "Neighbor",
    "assign_groups",
    "bfs_neighbors",
    "containing_group",
    "containment_matrix",
    "edges_within",
    "group_members",
]
