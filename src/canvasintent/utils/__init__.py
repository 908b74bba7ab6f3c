"""Utility functions for canvasintent."""

from canvasintent.utils.filetypes import (
    FileKind,
    classify_path,
    file_extension,
    file_name,
    mime_type_for,
)

__all__ = ["FileKind", "classify_path", "file_extension", "file_name", "mime_type_for"]
