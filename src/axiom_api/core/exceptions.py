"""Custom exceptions for the aXiom API."""

from typing import Any


class AxiomException(Exception):
    """Base exception for aXiom API."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class ValidationError(AxiomException):
    """Caller input is malformed. Raised before any store or analysis call."""

    status_code = 400

    def __init__(self, message: str, fields: dict[str, str] | None = None) -> None:
        self.fields = fields or {}
        super().__init__(message, "VALIDATION_ERROR", {"fields": self.fields} if fields else None)


class NotFoundError(AxiomException):
    """Resource not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str | None = None) -> None:
        super().__init__(
            f"{resource} not found",
            "NOT_FOUND",
            {"resource": resource, "identifier": identifier},
        )


class DatabaseError(AxiomException):
    """Persistence (or downstream) operation failed unexpectedly."""

    status_code = 500

    def __init__(self, message: str = "Database operation failed") -> None:
        super().__init__(message, "DATABASE_ERROR")


class AnalysisError(AxiomException):
    """Feedback classification failed.

    Never reaches the caller directly: the service layer reports it as a
    ``DatabaseError`` for the create operation.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "ANALYSIS_ERROR", details)
