"""
Shared Domain Kernel

Contains types and exceptions shared across all bounded contexts.
"""

from tunebox.domain.shared.exceptions import (
    BusinessRuleViolationError,
    CatalogUnavailableError,
    DomainError,
    InvalidIndexError,
    InvalidOperationError,
    UploadFailedError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "InvalidIndexError",
    "CatalogUnavailableError",
    "UploadFailedError",
]
