"""Breadth-first neighborhood traversal over the edge index."""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from canvasintent.graph.edges import EdgeIndex
from canvasintent.models import Node

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    UPSTREAM = "upstream"  # follow edges backward
    DOWNSTREAM = "downstream"  # follow edges forward


@dataclass(frozen=True)
class Neighbor:
    """A node reached by traversal."""

    node: Node
    distance: int
    label: Optional[str] = None  # label of the edge it was reached through


def bfs_neighbors(
    start_id: str,
    direction: Direction,
    index: EdgeIndex,
    nodes: Mapping[str, Node],
    max_nodes: int,
) -> list[Neighbor]:
    """Walk the graph breadth-first from start_id.

    Args:
        start_id: Node to start from (never part of the result)
        direction: UPSTREAM or DOWNSTREAM
        index: Edge index to follow
        nodes: node id -> Node lookup; ids missing here are not reported
        max_nodes: Maximum number of neighbors to return

    Returns:
        Neighbors ordered by distance, ties in edge enumeration order.
        Each node appears once, at its shortest hop distance.
    """
    result: list[Neighbor] = []
    if max_nodes <= 0:
        return result

    visited = {start_id}
    queue: deque[tuple[str, int, Optional[str]]] = deque()

    def enqueue_from(node_id: str, distance: int) -> None:
        if direction == Direction.UPSTREAM:
            steps = [(e.from_node, e.label) for e in index.incoming_to(node_id)]
        else:
            steps = [(e.to_node, e.label) for e in index.outgoing_from(node_id)]
        for neighbor_id, label in steps:
            if neighbor_id not in visited:
                visited.add(neighbor_id)
                queue.append((neighbor_id, distance + 1, label or None))

    enqueue_from(start_id, 0)
    while queue and len(result) < max_nodes:
        node_id, distance, label = queue.popleft()
        node = nodes.get(node_id)
        if node is None:
            continue
        result.append(Neighbor(node=node, distance=distance, label=label))
        enqueue_from(node_id, distance)

    logger.debug(f"BFS {direction.value} found {len(result)} nodes from {start_id}")
    return result
