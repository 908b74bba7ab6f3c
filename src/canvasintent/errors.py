"""Exception types raised by collaborators and file readers."""

from typing import Optional


class CanvasIntentError(Exception):
    """Base class for all canvasintent errors."""


class ContentLoadError(CanvasIntentError):
    """A content store could not read or write a path."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Cannot load {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ImageCodecError(CanvasIntentError):
    """Decoding, resizing or encoding an image failed."""

    def __init__(self, reason: str, path: Optional[str] = None):
        self.path = path
        self.reason = reason
        message = f"Cannot encode image {path}: {reason}" if path else reason
        super().__init__(message)


class CanvasFormatError(CanvasIntentError):
    """Data is not a valid JSON Canvas structure."""
