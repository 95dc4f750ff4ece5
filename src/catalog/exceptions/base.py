"""
Application-level errors raised by repositories and services.

The HTTP layer never inspects messages: it asks the error for its status
(`http_status()`) and body (`to_payload()`), both derived from `error_code`.
"""

from datetime import datetime, timezone
from typing import Iterable


class RepositoryError(Exception):
    """
    Base exception for repository/service errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['name'])
    - constraint: optional DB constraint name (for logs only, never sent to clients)
    - error_code: canonical short code (e.g., 'duplicate', 'not_found', 'database_error')
    """

    # The one table mapping an error kind to its HTTP status.
    ERROR_CODE_TO_STATUS = {
        "duplicate": 409,
        "invalid_field": 422,
        "not_found": 404,
        "invalid_input": 422,
        "database_error": 500,
    }
    DEFAULT_STATUS = 400

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        # Diagnostic form for logs: "Category already exists (fields: name; code: duplicate)"
        diagnostics = [
            f"{label}: {value}"
            for label, value in (
                ("fields", ", ".join(self.fields or ())),
                ("constraint", self.constraint),
                ("code", self.error_code),
            )
            if value
        ]
        if not diagnostics:
            return self.message
        return f"{self.message} ({'; '.join(diagnostics)})"

    def to_payload(self, details: str) -> dict:
        """
        Return the JSON-serializable error body:
            {
                "timestamp": "2024-05-01T10:00:00+00:00",
                "message": "Category not found with id: 999",
                "details": "uri=/api/categories/999"
            }
        `details` describes the request that failed. The constraint name and raw
        DB messages are never part of the payload.
        """
        return error_body(self.message, details)

    def http_status(self) -> int:
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, self.DEFAULT_STATUS)
        return self.DEFAULT_STATUS


def error_body(message: str, details: str) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": message,
        "details": details,
    }


class NotFoundError(RepositoryError):
    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class DuplicateError(RepositoryError):
    """A unique value (e.g. a category name) is already taken. Maps to 409 Conflict."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class InvalidFieldError(RepositoryError):
    """Raised when the caller names a field the model does not have."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


__all__ = [
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidFieldError",
    "error_body",
]
