"""CanvasIntent - turn a canvas selection into a bounded model request."""

from canvasintent.models import (
    Document,
    Edge,
    EditContext,
    ImageLoadConfig,
    Mode,
    Node,
    NodeEditIntent,
    NodeKind,
    ResolvedIntent,
)
from canvasintent.pipeline import IntentResolver

__version__ = "0.1.0"

__all__ = [
    "Document",
    "Edge",
    "EditContext",
    "ImageLoadConfig",
    "IntentResolver",
    "Mode",
    "Node",
    "NodeEditIntent",
    "NodeKind",
    "ResolvedIntent",
]
