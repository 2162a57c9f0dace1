"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite library)
- Catalog sources (songs HTTP API, local library)
- Media (ffplay engine)
- Console front end
"""

from tunebox.infrastructure.catalog.http_catalog import HttpCatalogSource
from tunebox.infrastructure.catalog.local_catalog import LocalLibraryCatalogSource
from tunebox.infrastructure.media.ffplay_engine import FFplayMediaEngine
from tunebox.infrastructure.persistence.database import Database

__all__ = [
    "Database",
    "FFplayMediaEngine",
    "HttpCatalogSource",
    "LocalLibraryCatalogSource",
]
