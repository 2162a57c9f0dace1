"""DTOs for the catalog and library services."""

from __future__ import annotations

from pydantic import BaseModel

from ...domain.catalog.entities import Track
from ...domain.shared.types import CatalogIndex, NonNegativeInt


class CatalogLoadResult(BaseModel):
    success: bool
    track_count: NonNegativeInt = 0
    current_index: CatalogIndex = -1
    track_lost: bool = False
    message: str = ""


class UploadResult(BaseModel):
    success: bool
    track: Track | None = None
    catalog_length: NonNegativeInt = 0
    message: str = ""


class ImportResult(BaseModel):

    added: NonNegativeInt = 0
    skipped: NonNegativeInt = 0
    added_titles: list[str] = []

    @property
    def total(self) -> int:
        return self.added + self.skipped
