"""Core data models for canvas documents: nodes, edges and geometry."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

from canvasintent.utils.filetypes import FileKind, classify_path


class NodeKind(str, Enum):
    """Kind of a canvas node. Immutable once the node is created."""

    TEXT = "text"
    FILE = "file"
    LINK = "link"
    GROUP = "group"


@dataclass(frozen=True)
class BBox:
    """Axis-aligned bounding box in canvas coordinates."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float


@dataclass(frozen=True)
class Node:
    """A single canvas node.

    Payload fields are populated according to kind: ``text`` for TEXT,
    ``file`` for FILE, ``url`` (and optionally ``label``) for LINK,
    ``label`` for GROUP.
    """

    id: str
    kind: NodeKind
    x: float
    y: float
    width: float
    height: float
    text: Optional[str] = None
    file: Optional[str] = None
    url: Optional[str] = None
    label: Optional[str] = None

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Node {self.id}: width/height must be non-negative")

    @property
    def bbox(self) -> BBox:
        return BBox(self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def is_group(self) -> bool:
        return self.kind == NodeKind.GROUP

    @property
    def file_kind(self) -> Optional[FileKind]:
        """Extension classification for file nodes, None for other kinds."""
        if self.kind != NodeKind.FILE or self.file is None:
            return None
        return classify_path(self.file)


@dataclass(frozen=True)
class Edge:
    """A directed, optionally labeled connection between two nodes."""

    id: str
    from_node: str
    to_node: str
    label: Optional[str] = None


@dataclass(frozen=True)
class Document:
    """An immutable snapshot of a canvas.

    Node and edge tuples keep document-declared order; every
    "first match wins" rule in the pipeline is defined against it.
    """

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    _index: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Coerce lists so callers can pass any sequence
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        index: dict[str, int] = {}
        for position, node in enumerate(self.nodes):
            if node.id in index:
                raise ValueError(f"Duplicate node id: {node.id}")
            index[node.id] = position
        object.__setattr__(self, "_index", index)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def get(self, node_id: str) -> Optional[Node]:
        """Look up a node by id."""
        position = self._index.get(node_id)
        return None if position is None else self.nodes[position]

    def node_map(self) -> dict[str, Node]:
        return {node.id: node for node in self.nodes}

    def in_document_order(self, node_ids: Iterable[str]) -> list[Node]:
        """Return the known nodes among node_ids, sorted by document order."""
        positions = sorted({self._index[nid] for nid in node_ids if nid in self._index})
        return [self.nodes[p] for p in positions]

    @property
    def groups(self) -> list[Node]:
        return [node for node in self.nodes if node.is_group]
