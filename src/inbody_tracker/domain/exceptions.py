"""
domain.exceptions - Custom exception hierarchy for the InBody tracker.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class ValidationError(DomainError):
    """Raised when one or more measurement fields fall outside their bounds.

    field_errors maps a field name to a single human-readable message so the
    caller can report each offending input separately.
    """

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(f"Invalid measurement fields: {fields}")


class ExtractionFailure(DomainError):
    """Raised inside an OCR provider when the report cannot be read at all.

    Providers catch this themselves and degrade to an empty result.
    """


class RepositoryError(DomainError):
    """Raised when a database operation fails."""


class StorageUnavailable(RepositoryError):
    """Raised when the persistence layer cannot be reached or rejects a write."""
