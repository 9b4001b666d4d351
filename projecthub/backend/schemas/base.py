"""
Base Schemas.

Uniform result envelope returned by every data-access and export
operation. Failures never raise across the service boundary; they come
back as ApiResponse(success=False, error=ErrorDetail(...)).
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from projecthub.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    """Metadata included in all results."""

    timestamp: datetime = Field(default_factory=utc_now)


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Standard result envelope.

    All service operations use this structure for consistency.
    """

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)

    @property
    def error_message(self) -> str | None:
        """Short human-readable failure message, None on success."""
        return self.error.message if self.error else None


class StrippedModel(BaseModel):
    """Input model that trims surrounding whitespace from every string."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


# Example usage:
#
# result = await ProjectService(session).get_project(identity, project_id)
# if result.success:
#     render(result.data)
# else:
#     show_error(result.error_message)
