"""Species catalog and photo storage."""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from plant_catalog.domain.catalog import (
    CategoryAlreadyExistsError,
    CategoryRecord,
    CategoryStats,
)

MEDIA_EXTENSION = ".jpg"

_logger = logging.getLogger(__name__)


class CatalogIndexRepository(Protocol):
    """Persistence interface for the species index."""

    def load_index(self) -> dict[str, dict[str, object]]:
        """Return the whole index, keyed by species name, in stored order."""

    def save_index(self, index: dict[str, dict[str, object]]) -> None:
        """Replace the stored index with the given mapping."""


class MediaRepository(Protocol):
    """Persistence interface for photo files grouped by species."""

    def ensure_category(self, name: str) -> None:
        """Create the species directory if it does not exist."""

    def list_files(self, name: str) -> list[str]:
        """Return file names stored for a species, empty if none."""

    def write_file(self, name: str, filename: str, content: bytes) -> None:
        """Write a file inside the species directory."""

    def file_path(self, name: str, filename: str) -> Path:
        """Return the location of a stored file."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MediaStore:
    """Catalog of species backed by an index and one directory per species.

    The index and the directories are not kept transactionally consistent:
    creation ensures the directory first and then rewrites the index, and
    media counts are read from the directories alone.
    """

    index_repository: CatalogIndexRepository
    media_repository: MediaRepository
    clock: Callable[[], datetime] = _utcnow
    rng: random.Random = field(default_factory=random.Random)

    def list_categories(self) -> list[str]:
        """Return species names in index order."""
        return list(self.index_repository.load_index())

    def category_exists(self, name: str) -> bool:
        """Return true when the species is present in the index."""
        return name in self.index_repository.load_index()

    def create_category(self, name: str) -> CategoryRecord:
        """Create a species directory and add it to the index."""
        index = self.index_repository.load_index()
        if name in index:
            raise CategoryAlreadyExistsError(name)
        created_at = self.clock()
        self.media_repository.ensure_category(name)
        index[name] = {"createdAt": created_at.isoformat()}
        self.index_repository.save_index(index)
        _logger.info("Category created: name=%s", name)
        return CategoryRecord(name=name, created_at=created_at)

    def count_media(self, name: str) -> int:
        """Return the number of stored photos, 0 for a missing directory."""
        return len(self.media_repository.list_files(name))

    def list_media(self, name: str) -> list[str]:
        """Return stored photo identifiers for a species."""
        return self.media_repository.list_files(name)

    def store_media(self, name: str, content: bytes) -> str:
        """Store photo bytes under a millisecond-timestamp file name."""
        timestamp_ms = int(self.clock().timestamp() * 1000)
        filename = f"{timestamp_ms}{MEDIA_EXTENSION}"
        self.media_repository.write_file(name, filename, content)
        _logger.info(
            "Photo stored: category=%s file=%s bytes=%s", name, filename, len(content)
        )
        return filename

    def pick_random(self, name: str) -> str | None:
        """Return a uniformly chosen photo identifier, or None when empty."""
        files = self.list_media(name)
        if not files:
            return None
        return self.rng.choice(files)

    def media_path(self, name: str, identifier: str) -> Path:
        """Return the location of a stored photo."""
        return self.media_repository.file_path(name, identifier)

    def stats(self) -> list[CategoryStats]:
        """Return photo counts for every indexed species."""
        return [
            CategoryStats(name=name, media_count=self.count_media(name))
            for name in self.list_categories()
        ]
