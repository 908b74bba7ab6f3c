"""Content stores that back file nodes with real bytes."""

from pathlib import Path
from typing import Optional

from canvasintent.protocols import ContentStore
from canvasintent.stores.folder_store import FolderContentStore
from canvasintent.stores.zip_store import ZipContentStore

# Store factories in priority order
_STORE_TYPES: list[type] = [
    ZipContentStore,
    FolderContentStore,
]


def get_store(source: Path | str) -> Optional[ContentStore]:
    """Build a content store that can serve the given vault source.

    Args:
        source: Path to the vault root (folder or zip file)

    Returns:
        A ContentStore for the source, or None if no store type handles it
    """
    source_path = Path(source)
    for store_type in _STORE_TYPES:
        if store_type.can_handle(source_path):
            return store_type(source_path)
    return None


def register_store(store_type: type) -> None:
    """Register a custom store type (for plugins/extensions).

    Args:
        store_type: A class with a ``can_handle(path)`` classmethod whose
            instances implement the ContentStore protocol
    """
    _STORE_TYPES.append(store_type)


__all__ = ["get_store", "register_store", "FolderContentStore", "ZipContentStore"]
