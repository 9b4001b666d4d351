"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, validate input, and implement business
rules. Public operations are wrapped with @service_operation so callers
always receive an ApiResponse: application errors become failure results
and unexpected faults become a generic failure, logged with traceback.

Usage:
    from projecthub.backend.services.base import BaseService, service_operation

    class ProjectService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = ProjectRepository(session)

        @service_operation("get_project")
        async def get_project(self, identity, project_id) -> ProjectResponse:
            owner_id = self._require_identity(identity)
            return ProjectResponse.model_validate(
                await self.repo.get_by_id(project_id, owner_id)
            )
"""

import functools
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ConflictError,
    DatabaseError,
    ValidationError,
)
from projecthub.backend.core.logging import get_logger
from projecthub.backend.core.security import Identity
from projecthub.backend.schemas.base import ApiResponse, ErrorDetail

logger = get_logger(__name__)

T = TypeVar("T")
SchemaT = TypeVar("SchemaT", bound=BaseModel)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def service_operation(
    operation: str,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[ApiResponse]]]:
    """
    Wrap a public service coroutine so it returns an ApiResponse.

    The wrapped coroutine returns its payload or raises. ApplicationError
    subclasses map to ErrorDetail(code, message, details); anything else
    maps to SYS_INTERNAL_ERROR with a generic message.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[ApiResponse]]:
        @functools.wraps(func)
        async def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> ApiResponse:
            try:
                data = await func(self, *args, **kwargs)
            except ApplicationError as e:
                self._logger.warning(
                    "Operation failed",
                    extra={"operation": operation, "code": e.code, "error": e.message},
                )
                return ApiResponse(
                    success=False,
                    error=ErrorDetail(
                        code=e.code,
                        message=e.message,
                        details=getattr(e, "details", None) or None,
                    ),
                )
            except Exception:
                self._logger.exception(
                    "Unexpected error",
                    extra={"operation": operation},
                )
                return ApiResponse(
                    success=False,
                    error=ErrorDetail(code="SYS_INTERNAL_ERROR", message=UNEXPECTED_ERROR_MESSAGE),
                )
            return ApiResponse(success=True, data=data)

        return wrapper

    return decorator


def unwrap(result: ApiResponse, fallback: str) -> Any:
    """
    Return the payload of a successful result, re-raising a failure.

    Used when one service composes another service's public operations.
    """
    if result.success:
        return result.data
    if result.error is None:
        raise ApplicationError(fallback)
    raise ApplicationError(result.error.message or fallback, code=result.error.code)


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session management
    - Logging context
    - Identity checks
    - Input parsing into pydantic schemas with readable messages
    - Error wrapping for database operations

    Subclasses should:
    - Call super().__init__(session) in their __init__
    - Initialize repositories in __init__
    - Decorate public operations with @service_operation
    """

    entity: str = "Record"

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the service with a database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    def _require_identity(self, identity: Identity | None) -> str:
        """
        Return the owner id for the caller.

        Raises:
            AuthenticationError: If there is no authenticated identity
        """
        if identity is None or not identity.user_id:
            raise AuthenticationError()
        return identity.user_id

    def _require_id(self, value: str | None, name: str) -> str:
        """
        Raises:
            ValidationError: If the identifier is empty
        """
        if not value or not str(value).strip():
            raise ValidationError(f"{name} ID is required")
        return str(value)

    def _parse(self, schema: type[SchemaT], data: SchemaT | Mapping[str, Any]) -> SchemaT:
        """
        Coerce caller data into a schema instance.

        Raises:
            ValidationError: With a short message for the first failing field
                and every failure under details["errors"]
        """
        if isinstance(data, schema):
            return data
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in err["loc"]), "message": self._describe(err)}
                for err in e.errors()
            ]
            raise ValidationError(errors[0]["message"], details={"errors": errors})

    def _describe(self, error: Mapping[str, Any]) -> str:
        """Human-readable message for one pydantic error."""
        field = str(error["loc"][0]) if error["loc"] else "input"
        label = f"{self.entity} {field.replace('_', ' ')}"
        kind = error["type"]
        if kind in ("missing", "string_too_short"):
            return f"{label} is required"
        if kind == "string_too_long":
            return f"{label} must be at most {error['ctx']['max_length']} characters"
        if kind == "value_error":
            return str(error["ctx"]["error"])
        if kind == "extra_forbidden":
            return f"Unknown field: {field}"
        return f"{label}: {error['msg']}"

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
    ) -> T:
        """
        Execute a database operation with error handling.

        Converts SQLAlchemy exceptions to application exceptions, passing
        the store's own message through, and rolls the session back so it
        stays usable.

        Raises:
            ConflictError: For unique constraint violations
            DatabaseError: For other database errors
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e.orig)},
            )
            await self._session.rollback()
            error_str = str(e.orig).lower()
            if "unique" in error_str or "duplicate" in error_str:
                raise ConflictError("Resource already exists")
            raise DatabaseError(str(e.orig))
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            await self._session.rollback()
            raise DatabaseError(str(getattr(e, "orig", None) or e))

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """Log a service operation with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
