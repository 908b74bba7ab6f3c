"""Protocol definitions for external collaborators."""

from canvasintent.protocols.content_store import ContentStore
from canvasintent.protocols.image_codec import ImageCodec

__all__ = ["ContentStore", "ImageCodec"]
