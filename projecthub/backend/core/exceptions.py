"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Services raise these internally; the result boundary in
projecthub.backend.services.base converts them to ApiResponse failures.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found or is not owned by the caller."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when no authenticated identity is available."""

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class DatabaseError(ApplicationError):
    """Raised when a store operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")


class ExportValidationError(ApplicationError):
    """Raised when an assembled export document fails its consistency check."""

    def __init__(self, message: str = "Generated export data is invalid") -> None:
        super().__init__(message, code="EXPORT_INVALID_DATA")
