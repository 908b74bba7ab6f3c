"""Data models for canvasintent."""

from canvasintent.models.document import BBox, Document, Edge, Node, NodeKind
from canvasintent.models.intent import (
    ConvertedNode,
    EditContext,
    ImageLoadConfig,
    ImageWithRole,
    Mode,
    NodeEditIntent,
    PreprocessResult,
    ResolvedIntent,
)
from canvasintent.utils.filetypes import FileKind

__all__ = [
    "BBox",
    "ConvertedNode",
    "Document",
    "Edge",
    "EditContext",
    "FileKind",
    "ImageLoadConfig",
    "ImageWithRole",
    "Mode",
    "Node",
    "NodeEditIntent",
    "NodeKind",
    "PreprocessResult",
    "ResolvedIntent",
]
