"""
Catalog Bounded Context

Track records, catalog ordering rules and the search view.
"""

from tunebox.domain.catalog.entities import Track
from tunebox.domain.catalog.repository import TrackRepository
from tunebox.domain.catalog.search import SearchEntry, SearchView, filter_catalog
from tunebox.domain.catalog.services import Catalog, CatalogDomainService
from tunebox.domain.catalog.value_objects import TrackId

__all__ = [
    # Entities
    "Track",
    # Value Objects
    "TrackId",
    "Catalog",
    # Search
    "SearchEntry",
    "SearchView",
    "filter_catalog",
    # Repository
    "TrackRepository",
    # Services
    "CatalogDomainService",
]
