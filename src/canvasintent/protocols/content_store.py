"""Protocol for content stores backing file nodes."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentStore(Protocol):
    """Protocol for reading (and persisting) vault content.

    Implementations resolve vault-relative paths such as ``notes/a.md``.
    Uses structural subtyping - no inheritance required.
    Failures are reported by raising ContentLoadError.
    """

    @property
    def source_type(self) -> str:
        """Return identifier for this store type (e.g., 'folder', 'zip')."""
        ...

    def read_text(self, path: str) -> str:
        """Return the UTF-8 text content of a file."""
        ...

    def read_binary(self, path: str) -> bytes:
        """Return the raw bytes of a file."""
        ...

    def exists(self, path: str) -> bool:
        """Check if a path resolves to a readable file."""
        ...

    def write_binary(self, path: str, data: bytes) -> None:
        """Persist new binary content at path.

        Read-only stores raise ContentLoadError.
        """
        ...
