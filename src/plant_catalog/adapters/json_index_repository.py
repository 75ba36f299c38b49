"""JSON file-backed species index."""

import json
from dataclasses import dataclass
from pathlib import Path

from plant_catalog.services.media_store import CatalogIndexRepository


@dataclass
class JsonCatalogIndexRepository(CatalogIndexRepository):
    """Stores the whole index in a single JSON object file."""

    path: Path

    def initialize(self) -> None:
        """Create an empty index file if none exists yet."""
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.save_index({})

    def load_index(self) -> dict[str, dict[str, object]]:
        """Read the index file; a missing file reads as empty."""
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as handle:
            return json.load(handle)

    def save_index(self, index: dict[str, dict[str, object]]) -> None:
        """Rewrite the index file with the given mapping."""
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(index, handle, ensure_ascii=False)
