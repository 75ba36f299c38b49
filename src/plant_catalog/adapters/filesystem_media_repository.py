"""Filesystem-backed photo storage."""

from dataclasses import dataclass
from pathlib import Path

from plant_catalog.services.media_store import MediaRepository


@dataclass
class FilesystemMediaRepository(MediaRepository):
    """One directory per species under a fixed root."""

    root: Path

    def initialize(self) -> None:
        """Create the storage root."""
        self.root.mkdir(parents=True, exist_ok=True)

    def ensure_category(self, name: str) -> None:
        """Create the species directory if needed."""
        self._category_dir(name).mkdir(parents=True, exist_ok=True)

    def list_files(self, name: str) -> list[str]:
        """Return sorted entry names of the species directory."""
        if not self._is_contained(name):
            return []
        folder = self.root / name
        if not folder.is_dir():
            return []
        return sorted(entry.name for entry in folder.iterdir())

    def write_file(self, name: str, filename: str, content: bytes) -> None:
        """Write bytes to a file, replacing any file with the same name."""
        (self._category_dir(name) / filename).write_bytes(content)

    def file_path(self, name: str, filename: str) -> Path:
        return self._category_dir(name) / filename

    def _category_dir(self, name: str) -> Path:
        if not self._is_contained(name):
            raise ValueError(f"Category is outside the storage root: {name!r}")
        return self.root / name

    def _is_contained(self, name: str) -> bool:
        """A species directory must sit directly below the storage root."""
        root = self.root.resolve()
        return (root / name).resolve().parent == root
