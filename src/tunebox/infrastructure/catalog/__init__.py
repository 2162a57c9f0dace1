"""Catalog sources: the songs HTTP API and the local SQLite library."""

from tunebox.infrastructure.catalog.http_catalog import HttpCatalogSource
from tunebox.infrastructure.catalog.local_catalog import LocalLibraryCatalogSource

__all__ = [
    "HttpCatalogSource",
    "LocalLibraryCatalogSource",
]
