# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages, events and exceptions
- catalog/: Track records, catalog ordering and the search view
- playback/: Transport state and track-advance rules
"""

from tunebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
