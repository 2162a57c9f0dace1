"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class BusinessRuleViolationError(DomainError):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str | None = None) -> None:
        msg = message or f"Business rule violated: {rule}"
        super().__init__(msg, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class InvalidIndexError(DomainError):
    """Raised when a catalog or view position is out of bounds.

    This is a caller contract violation; the session is left untouched.
    """

    def __init__(self, index: int, length: int, message: str | None = None) -> None:
        msg = message or f"Index {index} is out of range for {length} track(s)"
        super().__init__(msg, code="INVALID_INDEX")
        self.index = index
        self.length = length


class CatalogUnavailableError(DomainError):
    """Raised when the track catalog cannot be fetched or parsed."""

    def __init__(self, source: str, message: str | None = None) -> None:
        msg = message or f"Catalog source '{source}' is unavailable"
        super().__init__(msg, code="CATALOG_UNAVAILABLE")
        self.source = source


class UploadFailedError(DomainError):
    """Raised when a local file could not be turned into a catalog track."""

    def __init__(self, filename: str, message: str | None = None) -> None:
        msg = message or f"Failed to upload '{filename}'"
        super().__init__(msg, code="UPLOAD_FAILED")
        self.filename = filename
