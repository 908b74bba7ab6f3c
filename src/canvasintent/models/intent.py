"""Data models produced and consumed by the resolution pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from canvasintent.models.document import Edge, Node, NodeKind
from canvasintent.utils.filetypes import FileKind, file_name


class Mode(str, Enum):
    """What the caller intends to do with the resolved payload."""

    CHAT = "chat"
    IMAGE = "image"
    NODE = "node"


@dataclass(frozen=True)
class ImageLoadConfig:
    """Compression parameters for image loading."""

    quality: int = 80
    max_dimension: int = 2048


@dataclass
class ConvertedNode:
    """Per-call working copy of a node with resolved and loaded fields.

    Created fresh for every resolution and discarded afterwards.
    """

    node: Node
    is_group_member: bool = False
    group_id: Optional[str] = None
    content: Optional[str] = None  # text body, link url, or loaded markdown
    file_content: Optional[str] = None  # markdown body only
    base64: Optional[str] = None  # images only
    mime_type: Optional[str] = None
    pdf_base64: Optional[str] = None

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def kind(self) -> NodeKind:
        return self.node.kind

    @property
    def file_path(self) -> Optional[str]:
        return self.node.file

    @property
    def file_kind(self) -> Optional[FileKind]:
        return self.node.file_kind

    @property
    def is_image(self) -> bool:
        return self.file_kind == FileKind.IMAGE

    @property
    def is_pdf(self) -> bool:
        return self.file_kind == FileKind.PDF

    @property
    def is_markdown(self) -> bool:
        return self.file_kind == FileKind.MARKDOWN

    @property
    def display_name(self) -> str:
        """Short human-readable name used in warnings and headers."""
        if self.file_path:
            return file_name(self.file_path)
        if self.kind == NodeKind.LINK and self.node.url:
            return self.node.url
        return self.id

    @classmethod
    def from_node(cls, node: Node) -> "ConvertedNode":
        content = None
        if node.kind == NodeKind.TEXT:
            content = node.text or ""
        elif node.kind == NodeKind.LINK:
            content = node.url
        elif node.kind == NodeKind.GROUP:
            content = node.label
        return cls(node=node, content=content)


@dataclass(frozen=True)
class ImageWithRole:
    """An encoded image with its semantic role."""

    base64: str
    mime_type: str
    role: str
    node_id: str


@dataclass
class PreprocessResult:
    """Output of selection preprocessing."""

    effective_nodes: list[ConvertedNode] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    group_labels: dict[str, str] = field(default_factory=dict)

    @property
    def image_count(self) -> int:
        return sum(1 for node in self.effective_nodes if node.is_image)

    @property
    def text_count(self) -> int:
        return sum(1 for node in self.effective_nodes if not node.is_image)


@dataclass
class ResolvedIntent:
    """Provider-agnostic payload for a multi-node selection."""

    nodes: list[ConvertedNode] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    images: list[ImageWithRole] = field(default_factory=list)
    instruction: str = ""
    context_text: str = ""
    warnings: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    can_generate: bool = False

    def to_dict(self, include_image_data: bool = True) -> dict:
        """Plain-JSON view for CLI and server output."""
        return {
            "nodes": [node.id for node in self.nodes],
            "images": [
                {
                    "node_id": image.node_id,
                    "role": image.role,
                    "mime_type": image.mime_type,
                    **({"base64": image.base64} if include_image_data else {}),
                }
                for image in self.images
            ],
            "instruction": self.instruction,
            "context_text": self.context_text,
            "warnings": list(self.warnings),
            "skipped_files": list(self.skipped_files),
            "can_generate": self.can_generate,
        }


@dataclass(frozen=True)
class EditContext:
    """A text span selected inside a single node."""

    node_id: str
    selected_text: str
    pre_text: str = ""
    post_text: str = ""


@dataclass
class NodeEditIntent:
    """Payload for editing a text span in place."""

    target_text: str = ""
    pre_text: str = ""
    post_text: str = ""
    upstream_context: str = ""
    downstream_context: str = ""
    images: list[ImageWithRole] = field(default_factory=list)
    instruction: str = ""
    warnings: list[str] = field(default_factory=list)
    can_edit: bool = False

    def to_dict(self, include_image_data: bool = True) -> dict:
        return {
            "target_text": self.target_text,
            "pre_text": self.pre_text,
            "post_text": self.post_text,
            "upstream_context": self.upstream_context,
            "downstream_context": self.downstream_context,
            "images": [
                {
                    "node_id": image.node_id,
                    "role": image.role,
                    "mime_type": image.mime_type,
                    **({"base64": image.base64} if include_image_data else {}),
                }
                for image in self.images
            ],
            "instruction": self.instruction,
            "warnings": list(self.warnings),
            "can_edit": self.can_edit,
        }
