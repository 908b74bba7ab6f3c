"""Edge filtering and adjacency indexes."""

from dataclasses import dataclass, field
from typing import Iterable

from canvasintent.models import Document, Edge


def edges_within(document: Document, node_ids: Iterable[str]) -> list[Edge]:
    """Edges whose both endpoints are in node_ids, in document order.

    Edges leaving the set are dropped, not reported.
    """
    allowed = set(node_ids)
    return [e for e in document.edges if e.from_node in allowed and e.to_node in allowed]


@dataclass(frozen=True)
class EdgeIndex:
    """Incoming and outgoing edges per node id.

    Built once per call and never mutated; per-node lists keep edge
    enumeration order.
    """

    incoming: dict[str, tuple[Edge, ...]] = field(default_factory=dict)
    outgoing: dict[str, tuple[Edge, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, edges: Iterable[Edge]) -> "EdgeIndex":
        incoming: dict[str, list[Edge]] = {}
        outgoing: dict[str, list[Edge]] = {}
        for edge in edges:
            incoming.setdefault(edge.to_node, []).append(edge)
            outgoing.setdefault(edge.from_node, []).append(edge)
        return cls(
            incoming={k: tuple(v) for k, v in incoming.items()},
            outgoing={k: tuple(v) for k, v in outgoing.items()},
        )

    @classmethod
    def for_document(cls, document: Document) -> "EdgeIndex":
        """Index every edge whose endpoints both exist in document."""
        return cls.build(e for e in document.edges if e.from_node in document and e.to_node in document)

    def incoming_to(self, node_id: str) -> tuple[Edge, ...]:
        return self.incoming.get(node_id, ())

    def outgoing_from(self, node_id: str) -> tuple[Edge, ...]:
        return self.outgoing.get(node_id, ())
