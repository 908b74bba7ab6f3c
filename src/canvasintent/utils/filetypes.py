"""File type classification utilities."""

from enum import Enum
from pathlib import PurePosixPath


class FileKind(str, Enum):
    """Classification of a file node by extension."""

    IMAGE = "image"
    PDF = "pdf"
    MARKDOWN = "markdown"
    OTHER = "other"


# Extensions the pipeline treats as images
IMAGE_EXTENSIONS = {
    ".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".bmp", ".ico",
}

MARKDOWN_EXTENSIONS = {".md"}

PDF_EXTENSIONS = {".pdf"}

MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".bmp": "image/bmp",
    ".ico": "image/x-icon",
    ".pdf": "application/pdf",
    ".md": "text/markdown",
}


def file_extension(path: str) -> str:
    """Return the lowercased extension of a vault path, including the dot."""
    return PurePosixPath(path).suffix.lower()


def file_name(path: str) -> str:
    """Return the last component of a vault path."""
    return PurePosixPath(path).name or path


def classify_path(path: str) -> FileKind:
    """Classify a file path by extension.

    Args:
        path: Vault-relative path (forward slashes)

    Returns:
        The FileKind for the extension; OTHER when unrecognized
    """
    ext = file_extension(path)
    if ext in IMAGE_EXTENSIONS:
        return FileKind.IMAGE
    if ext in PDF_EXTENSIONS:
        return FileKind.PDF
    if ext in MARKDOWN_EXTENSIONS:
        return FileKind.MARKDOWN
    return FileKind.OTHER


def mime_type_for(path: str) -> str:
    """Best-effort MIME type for a path, defaulting to octet-stream."""
    return MIME_TYPES.get(file_extension(path), "application/octet-stream")
