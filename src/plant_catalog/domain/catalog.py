"""Domain models for the species catalog."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CategoryRecord:
    """A species entry as stored in the catalog index."""

    name: str
    created_at: datetime


@dataclass(frozen=True)
class CategoryStats:
    """Number of stored photos for a species."""

    name: str
    media_count: int


class CategoryAlreadyExistsError(Exception):
    """Raised when creating a species that is already in the index."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Category already exists: {name}")
        self.name = name
