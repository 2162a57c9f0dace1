"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from tunebox.application.interfaces.catalog_source import CatalogSource
from tunebox.application.interfaces.media_engine import MediaEngine

__all__ = [
    "CatalogSource",
    "MediaEngine",
]
