"""Content store for a vault on the local filesystem."""

import logging
from pathlib import Path

from canvasintent.errors import ContentLoadError

logger = logging.getLogger(__name__)


class FolderContentStore:
    """Content store reading from (and writing to) a vault folder."""

    source_type = "folder"

    def __init__(self, root: Path | str):
        self.root = Path(root).resolve()

    @classmethod
    def can_handle(cls, source: Path) -> bool:
        """Check if this is an existing directory."""
        return source.is_dir()

    def _resolve(self, path: str) -> Path:
        """Map a vault-relative path to a filesystem path inside root."""
        try:
            full_path = (self.root / path.lstrip("/")).resolve()
        except (OSError, ValueError) as e:
            raise ContentLoadError(path, f"invalid path: {e}") from e
        if full_path != self.root and self.root not in full_path.parents:
            raise ContentLoadError(path, "path escapes vault root")
        return full_path

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except ContentLoadError:
            return False

    def read_text(self, path: str) -> str:
        """Read a file as UTF-8 text, replacing undecodable bytes."""
        return self.read_binary(path).decode("utf-8", errors="replace")

    def read_binary(self, path: str) -> bytes:
        """Read raw file bytes.

        Raises:
            ContentLoadError: If the file is missing or unreadable
        """
        full_path = self._resolve(path)
        try:
            return full_path.read_bytes()
        except FileNotFoundError:
            raise ContentLoadError(path, "file not found") from None
        except (OSError, ValueError) as e:
            raise ContentLoadError(path, str(e)) from e

    def write_binary(self, path: str, data: bytes) -> None:
        """Write bytes to path, creating parent folders as needed."""
        full_path = self._resolve(path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
        except (OSError, ValueError) as e:
            raise ContentLoadError(path, str(e)) from e
        logger.info(f"Wrote {len(data)} bytes to {path}")
