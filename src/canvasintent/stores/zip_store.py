"""Read-only content store for a zipped vault."""

import zipfile
from pathlib import Path

from canvasintent.errors import ContentLoadError


class ZipContentStore:
    """Content store serving files out of a ZIP archive."""

    source_type = "zip"

    def __init__(self, source: Path | str):
        self.source = Path(source)
        self._members: set[str] | None = None

    @classmethod
    def can_handle(cls, source: Path) -> bool:
        """Check if this is a zip file."""
        return source.suffix.lower() == ".zip" and source.exists()

    @property
    def members(self) -> set[str]:
        """Lazy-load the archive's file listing on first access."""
        if self._members is None:
            try:
                with zipfile.ZipFile(self.source, "r") as zf:
                    self._members = {
                        info.filename for info in zf.infolist() if not info.is_dir()
                    }
            except (zipfile.BadZipFile, OSError) as e:
                raise ContentLoadError(str(self.source), str(e)) from e
        return self._members

    def exists(self, path: str) -> bool:
        try:
            return path.lstrip("/") in self.members
        except ContentLoadError:
            return False

    def read_text(self, path: str) -> str:
        return self.read_binary(path).decode("utf-8", errors="replace")

    def read_binary(self, path: str) -> bytes:
        """Read an archive member.

        Raises:
            ContentLoadError: If the member is missing or the archive is corrupt
        """
        name = path.lstrip("/")
        if name not in self.members:
            raise ContentLoadError(path, "file not found")
        try:
            with zipfile.ZipFile(self.source, "r") as zf:
                return zf.read(name)
        except (zipfile.BadZipFile, OSError) as e:
            raise ContentLoadError(path, str(e)) from e

    def write_binary(self, path: str, data: bytes) -> None:
        raise ContentLoadError(path, "zip vaults are read-only")
